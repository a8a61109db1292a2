"""
Seed the scenario history with a few demo automation scenarios.
Only useful when DATABASE_URL points at a file or server database.
"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.calculations.roi import calculate_roi, coerce_roi_input
from app.db.database import get_db_context, init_db
from app.db.models import SavedScenario

DEMO_SCENARIOS = {
    "Small AP team": {
        "invoices_per_month": 500,
        "manual_mins_per_invoice": 12,
        "automation_mins_per_invoice": 3,
        "hourly_wage": 35,
        "software_cost_per_month": 250,
        "implementation_cost_one_time": 1000,
    },
    "Shared services center": {
        "invoices_per_month": 8000,
        "manual_mins_per_invoice": 9,
        "automation_mins_per_invoice": 2,
        "hourly_wage": 28,
        "software_cost_per_month": 4500,
        "implementation_cost_one_time": 60000,
    },
    # Automation that costs more than it saves
    "Low volume": {
        "invoices_per_month": 40,
        "manual_mins_per_invoice": 10,
        "automation_mins_per_invoice": 4,
        "hourly_wage": 30,
        "software_cost_per_month": 300,
        "implementation_cost_one_time": 2500,
    },
}


def main():
    init_db()

    with get_db_context() as db:
        for name, raw_inputs in DEMO_SCENARIOS.items():
            existing = db.query(SavedScenario).filter(SavedScenario.name == name).first()
            if existing:
                print(f"Scenario '{name}' already exists (ID: {existing.id})")
                continue

            inputs = coerce_roi_input(raw_inputs).inputs
            result = calculate_roi(inputs)

            scenario = SavedScenario(
                name=name,
                inputs=inputs.to_dict(),
                result=result.to_dict(),
            )
            db.add(scenario)
            db.flush()
            print(
                f"Created scenario: {name} (ID: {scenario.id}) "
                f"savings ${result.monthly_savings:,.0f}/month, ROI {result.roi_percent:.0f}%"
            )

    print("\nDemo scenarios created successfully!")


if __name__ == "__main__":
    main()
