"""Seed the global product vocabulary."""
from dishbook.database import SessionLocal
from dishbook.models.product import Product

DEFAULT_PRODUCTS = [
    "jajko",
    "mleko",
    "masło",
    "mąka pszenna",
    "cukier",
    "sól",
    "pieprz czarny",
    "cebula",
    "czosnek",
    "marchew",
    "pomidor",
    "ogórek",
    "ziemniaki",
    "jabłko",
    "oliwa z oliwek",
    "śmietana 18%",
    "ser żółty",
    "makaron",
    "ryż",
    "pierś z kurczaka",
]


def seed_products(db=None) -> int:
    """Insert missing global products. Returns how many were added."""
    owns_session = db is None
    db = db or SessionLocal()

    try:
        existing = {
            name
            for (name,) in db.query(Product.name).filter(Product.owner_id.is_(None))
        }

        added = 0
        for name in DEFAULT_PRODUCTS:
            if name not in existing:
                db.add(Product(owner_id=None, name=name))
                added += 1

        db.commit()
        print(f"Seeded {added} global products ({len(existing)} already present).")
        return added

    finally:
        if owns_session:
            db.close()


if __name__ == "__main__":
    seed_products()
