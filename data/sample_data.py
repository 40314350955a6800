"""Generate a synthetic tasting panel for the demo store."""

import pandas as pd
import random
import os

from config.defaults import CONFIG_COLLECTION, PEOPLE_COLLECTION, ROLE_PRESIDENT, ROLE_TASTER, TABLE_COUNT_KEY

FIRST_NAMES = [
    "Lucía", "Javier", "Marta", "Andrés", "Carmen", "Pablo", "Elena", "Diego", "Isabel", "Miguel",
    "Sofía", "Raúl", "Laura", "Tomás", "Nuria", "Álvaro", "Beatriz", "Hugo", "Irene", "Óscar",
    "Paula", "Sergio",
]
LAST_NAMES = ["García", "Martín", "López", "Sánchez", "Pérez", "Gómez", "Ruiz", "Díaz", "Moreno", "Romero"]
COUNTRIES = ["España", "España", "España", "Portugal", "Francia", "Italia", "Chile", "México"]


def generate_roster_df(people: int = 22, seated_tables: int = 4) -> pd.DataFrame:
    """Tasters seated table by table (seat 1 presides); tables past seated_tables stay empty.

    Tablet numbers follow the tablet-login convention tablet = (mesa - 1) * 5 + puesto.
    """
    random.seed(42)
    rows = []
    for idx in range(people):
        table = idx // 5 + 1
        seat = idx % 5 + 1
        seated = table <= seated_tables
        rows.append({
            "Nombre": f"{FIRST_NAMES[idx % len(FIRST_NAMES)]} {random.choice(LAST_NAMES)}",
            "Codigo": f"C{idx + 1:03d}",
            "Pais": random.choice(COUNTRIES),
            "Email": f"catador{idx + 1}@example.com",
            "Rol": ROLE_PRESIDENT if seated and seat == 1 else ROLE_TASTER,
            "Mesa": table if seated else None,
            "Puesto": seat if seated else None,
            "Tablet": str((table - 1) * 5 + seat) if seated else None,
            "Activo": True,
        })
    # Leave one seat free so the demo shows a partial table
    for row in reversed(rows):
        if row["Mesa"] is not None:
            row.update({"Mesa": None, "Puesto": None, "Tablet": None, "Rol": ROLE_TASTER})
            break
    return pd.DataFrame(rows)


def generate_seed_tables(table_count: int = 5) -> dict:
    """Rows for InMemoryStore: the sample roster plus the table-count setting."""
    from data.loader import parse_people

    people = []
    for idx, person in enumerate(parse_people(generate_roster_df())):
        row = person.to_row()
        row["id"] = f"sample-{idx + 1:03d}"
        people.append(row)
    return {
        PEOPLE_COLLECTION: people,
        CONFIG_COLLECTION: [{"clave": TABLE_COUNT_KEY, "valor": str(table_count)}],
    }


def generate_sample_csv(output_dir: str):
    """Write the sample roster as CSV and XLSX to the given directory."""
    os.makedirs(output_dir, exist_ok=True)
    df = generate_roster_df()
    df.to_csv(os.path.join(output_dir, "catadores.csv"), index=False)
    df.to_excel(os.path.join(output_dir, "catadores.xlsx"), index=False, engine="openpyxl")


if __name__ == "__main__":
    out = os.path.join(os.path.dirname(__file__), "..", "sample_files")
    generate_sample_csv(out)
    print("Sample roster files generated in sample_files/")
