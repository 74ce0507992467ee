import argparse

from dotenv import load_dotenv

# Load environment variables from your .env file before the settings are read
load_dotenv()

from crm_backend.crud import address_crud, customer_crud  # noqa: E402
from crm_backend.crud.customer_crud import DuplicatePhoneNumberError  # noqa: E402
from crm_backend.db.session import SessionLocal, init_db  # noqa: E402
from crm_backend.schemas.address_schemas import AddressCreate  # noqa: E402
from crm_backend.schemas.customer_schemas import CustomerCreate  # noqa: E402

# A handful of customers to click through in the UI
SAMPLE_CUSTOMERS = [
    (
        CustomerCreate(first_name="Asha", last_name="Smith", phone_number="9876543210"),
        [
            AddressCreate(address_details="12 MG Road", city="Bengaluru", state="Karnataka", pin_code="560001"),
            AddressCreate(address_details="4 Residency Road", city="Bengaluru", state="Karnataka", pin_code="560025"),
        ],
    ),
    (
        CustomerCreate(first_name="Rahul", last_name="Verma", phone_number="9123456780"),
        [
            AddressCreate(address_details="221 Linking Road", city="Mumbai", state="Maharashtra", pin_code="400050"),
        ],
    ),
    (
        CustomerCreate(first_name="Meera", last_name="Smithson", phone_number="9988776655"),
        [],
    ),
]


def seed():
    db = SessionLocal()
    try:
        for customer_in, addresses in SAMPLE_CUSTOMERS:
            try:
                db_customer = customer_crud.create_customer(db, customer_in=customer_in)
            except DuplicatePhoneNumberError:
                print(f"Skipping {customer_in.first_name} {customer_in.last_name}: phone number already exists")
                continue
            for address_in in addresses:
                address_crud.create_address(db, address_in=address_in, customer_id=db_customer.id)
            print(f"Seeded customer {db_customer.id} with {len(addresses)} address(es)")
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the CRM tables, optionally with sample data.")
    parser.add_argument("--seed", action="store_true", help="insert a few sample customers and addresses")
    args = parser.parse_args()

    init_db()
    if args.seed:
        seed()
