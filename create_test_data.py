#!/usr/bin/env python3
"""
Create a sample student records document to seed the repository file.
"""
import json
import random
import sys
from faker import Faker
from record_store import RECORD_FIELDS

BLOOD_GROUPS = ['A+', 'A-', 'B+', 'B-', 'AB+', 'AB-', 'O+', 'O-']


def create_sample_records(count=25, seed=None):
    """Create realistic student records with exactly the standard fields."""
    fake = Faker('en_IN')  # Indian locale for better names
    rng = random.Random(seed)
    if seed is not None:
        fake.seed_instance(seed)

    records = []
    base_id = 1700000000000
    for i in range(count):
        gender = rng.choice(['Male', 'Female'])
        if gender == 'Male':
            first_name = fake.first_name_male()
        else:
            first_name = fake.first_name_female()
        last_name = fake.last_name()
        adno = str(2024000 + i + 1)

        record = {
            'id': base_id + i,
            'Username': f"{first_name.lower()}{adno[-3:]}",
            'adno': adno,
            'Name': f"{first_name} {last_name}",
            'Guardian': fake.name_male(),
            'address': fake.address().replace('\n', ', '),
            'dateofbirth': fake.date_of_birth(minimum_age=10, maximum_age=18).isoformat(),
            'bloodgroup': rng.choice(BLOOD_GROUPS),
            'phone': fake.msisdn()[:10],
            'Password': fake.password(length=10),
            'Photo': f"photos/{adno}.jpg",
        }
        records.append({field: record[field] for field in RECORD_FIELDS})

    return records


def write_document(records, output_file):
    with open(output_file, 'w', encoding='utf-8') as f:
        f.write(json.dumps(records, indent=2, ensure_ascii=False))
    return output_file


if __name__ == "__main__":
    output_file = sys.argv[1] if len(sys.argv) > 1 else 'students.json'
    count = int(sys.argv[2]) if len(sys.argv) > 2 else 25

    records = create_sample_records(count)
    write_document(records, output_file)

    print(f"Sample records created: '{output_file}'")
    print(f"Total records: {len(records)}")
    print(f"Commit '{output_file}' to the repository and point FILE_PATH at it")
