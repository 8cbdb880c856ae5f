"""Prints the columns of the SimulaFin tables in the configured database."""
import sys
import os

# Add project root to sys.path
sys.path.append(os.getcwd())

from sqlalchemy import inspect  # noqa: E402
from simulafin.core.database import engine  # noqa: E402

TABLES = ("users", "simulations", "financing_submissions")


def inspect_tables():
    try:
        inspector = inspect(engine)
        table_names = inspector.get_table_names()
        print(f"Tables found: {table_names}")

        for table in TABLES:
            if table not in table_names:
                print(f"\nTable '{table}' does not exist.")
                continue
            print(f"\nColumns in '{table}':")
            for column in inspector.get_columns(table):
                print(f"- {column['name']} ({column['type']})")
    except Exception as e:
        print(f"Error during inspection: {e}")
        sys.exit(1)


if __name__ == "__main__":
    inspect_tables()
