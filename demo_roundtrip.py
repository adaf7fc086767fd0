#!/usr/bin/env python3
"""
Round-trip Demo: records → CSV → rows

Shows the full cycle:
1. Encode nested records to CSV
2. Decode the CSV back to rows
3. Dump the decoded rows as YAML

Note how the item sub-keys (src, alt) are lost along the way.
"""

from flatcsv import CsvEncoder
from flatcsv.serialization import rows_to_yaml


RECORDS = [
    {
        "title": "This is title 1",
        "body": "This is, body 1",
        "images": ["img1.jpg"],
        "alias": "",
        "status": 1,
    },
    {
        "title": "This is title 3",
        "body": ["<p>This is, body 3</p>"],
        "images": [
            {"src": "img1.jpg", "alt": "Image 1"},
            {"src": "img2.jpg", "alt": "Image, 2"},
        ],
        "alias": "",
        "status": 0,
    },
]


def main():
    encoder = CsvEncoder()

    print("=" * 80)
    print("ROUND-TRIP DEMO: records → CSV → rows")
    print("=" * 80)

    print("\n1. ENCODING...")
    text = encoder.encode(RECORDS, "csv")
    print(text)

    print("2. DECODING...")
    rows = encoder.decode(text, "csv", {"list_fields": ["images"]})
    print(f"   ✓ Rows: {len(rows)}")

    print("\n3. DECODED ROWS (YAML)...")
    print(rows_to_yaml(rows))


if __name__ == "__main__":
    main()
