"""
Import flashcards from a CSV file into one group.

The CSV needs `front` and `back` columns; extra columns are ignored.
Rows with an empty front or back are skipped. Cards are appended after
the group's existing cards, keeping the file order.

Usage:
    python -m scripts.import_cards cards.csv --project my-project --group chapter-1
"""

from __future__ import annotations

import argparse
import uuid
from pathlib import Path

import pandas as pd
from dotenv import load_dotenv

from practice import srs
from practice.cards_repo import CardContent, CardSource


FRONT_COL = "front"
BACK_COL = "back"


def load_cards_csv(path: Path) -> pd.DataFrame:
    """
    Read and clean the CSV: trimmed text, blank rows dropped.
    """
    df = pd.read_csv(path, dtype=str).fillna("")
    missing = [col for col in (FRONT_COL, BACK_COL) if col not in df.columns]
    if missing:
        raise ValueError(
            f"CSV must contain columns '{FRONT_COL}' and '{BACK_COL}'. "
            f"Found: {list(df.columns)}"
        )

    df = df[[FRONT_COL, BACK_COL]].copy()
    df[FRONT_COL] = df[FRONT_COL].str.strip()
    df[BACK_COL] = df[BACK_COL].str.strip()
    return df[(df[FRONT_COL] != "") & (df[BACK_COL] != "")].reset_index(drop=True)


def build_cards(df: pd.DataFrame, project_id: str, group_id: str, start_index: int = 0) -> list[CardContent]:
    return [
        CardContent(
            id=str(uuid.uuid4()),
            project_id=project_id,
            group_id=group_id,
            front=row[FRONT_COL],
            back=row[BACK_COL],
            order_index=start_index + i,
        )
        for i, row in enumerate(df.to_dict("records"))
    ]


def import_cards(path: Path, project_id: str, group_id: str, source: CardSource) -> int:
    """
    Append the CSV's cards to a group.

    Returns:
        Number of cards inserted
    """
    df = load_cards_csv(path)
    existing = source.cards_for_group(project_id, group_id)
    start_index = max((card.order_index for card in existing), default=-1) + 1
    return source.add_cards(build_cards(df, project_id, group_id, start_index))


def main() -> None:
    parser = argparse.ArgumentParser(description="Import flashcards from CSV")
    parser.add_argument("csv_path", type=Path, help="CSV with front/back columns")
    parser.add_argument("--project", required=True, help="Project id")
    parser.add_argument("--group", required=True, help="Group id")
    args = parser.parse_args()

    load_dotenv()
    if not args.csv_path.exists():
        raise FileNotFoundError(f"Missing CSV file: {args.csv_path}")

    srs.init_db()
    count = import_cards(args.csv_path, args.project, args.group, CardSource())
    print(f"✓ Imported {count} cards into {args.project}/{args.group}")


if __name__ == "__main__":
    main()
