# storefront/scripts/seed.py
import argparse
import logging
import secrets

from sqlmodel import Session, select

from storefront.core.auth import hash_password
from storefront.core.config import get_settings
from storefront.database import create_db_and_tables, engine
from storefront.models.product import Product
from storefront.models.user import User

# Register every table before create_all()
from storefront.models import cart as _cart_models  # noqa: F401
from storefront.models import contact as _contact_models  # noqa: F401
from storefront.models import order as _order_models  # noqa: F401

logger = logging.getLogger(__name__)

settings = get_settings()

# (name, description, price, category, stock_quantity, featured, image)
SAMPLE_PRODUCTS: list[tuple[str, str, float, str, int, bool, str]] = [
    (
        "Minimalist Ceramic Vase",
        "Elegant ceramic vase in a clean modern shape. Fits any room and any kind of flowers or dried stems.",
        189.0, "home_goods", 25, True, "product1.png",
    ),
    (
        "Antique Candle Holders (Pair)",
        "A pair of antique-style candle holders with a metallic finish, made with attention to every detail.",
        245.0, "lighting", 15, True, "product2.png",
    ),
    (
        "Decorative Cushion",
        "Soft decorative cushion for the living room, made from durable quality fabrics in warm tones.",
        129.0, "textiles", 30, True, "product3.png",
    ),
    (
        "Designer Table Lamp",
        "Table lamp with a special shade that gives a warm, inviting light and doubles as a decor piece.",
        320.0, "lighting", 12, True, "product4.png",
    ),
    (
        "Luxury Scented Candle",
        "Natural wax candle with a calming scent and a long burn time, perfect for a quiet evening.",
        85.0, "fragrances", 40, True, "product5.png",
    ),
    (
        "Ficus in a Designer Pot",
        "Easy-care air purifying ficus that arrives in a designed pot suitable for any room.",
        165.0, "plants", 20, True, "product6.png",
    ),
    (
        "Colorful Bohemian Rug",
        "Bohemian rug in warm rich colors with a unique pattern, woven from durable materials.",
        450.0, "rugs", 8, True, "product7.png",
    ),
    (
        "Modern Wall Clock",
        "Minimal wall clock with a silent movement that becomes a focal point on any wall.",
        275.0, "accessories", 18, True, "product8.png",
    ),
    (
        "Framed Art Print",
        "Original artwork in a quality frame that turns any wall into a small gallery.",
        390.0, "art", 10, True, "product9.png",
    ),
    (
        "Round Designer Mirror",
        "Round mirror with a designed frame that adds light and a sense of space to the room.",
        220.0, "accessories", 15, False, "product11.png",
    ),
    (
        "Wicker Storage Basket",
        "Natural wicker basket for laundry, toys or accessories.",
        95.0, "home_goods", 22, False, "product10.png",
    ),
    (
        "Hand-Blown Glass Goblet",
        "Handmade glass goblet for flowers or as a decorative piece on its own.",
        150.0, "home_goods", 18, False, "product12.png",
    ),
]


def seed_products(session: Session) -> int:
    """
    Insert the sample catalog when the products table is empty.

    Returns the number of products inserted.
    """
    if session.exec(select(Product.id).limit(1)).first() is not None:
        logger.info("Catalog already has products, skipping sample catalog")
        return 0

    for name, description, price, category, stock, featured, image in SAMPLE_PRODUCTS:
        session.add(
            Product(
                name=name,
                description=description,
                price=price,
                category=category,
                stock_quantity=stock,
                in_stock=stock > 0,
                featured=featured,
                image_url=f"/images/{image}",
            )
        )
    session.commit()
    return len(SAMPLE_PRODUCTS)


def ensure_admin(session: Session, email: str, password: str) -> tuple[User, bool]:
    """
    Make sure an active admin account exists for `email`.

    An existing account is promoted and re-activated; its password is kept.
    Returns the account and whether it was created.
    """
    email = email.strip().lower()
    user = session.exec(select(User).where(User.email == email)).first()
    created = user is None
    if created:
        user = User(
            first_name="Store",
            last_name="Admin",
            email=email,
            password_hash=hash_password(password),
            phone="0500000000",
            role="admin",
        )
    else:
        user.role = "admin"
        user.is_active = True

    session.add(user)
    session.commit()
    session.refresh(user)
    return user, created


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Create the admin account and a sample catalog.")
    parser.add_argument("--admin-email", default=settings.SEED_ADMIN_EMAIL)
    parser.add_argument("--no-products", action="store_true", help="only create the admin account")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)

    password = settings.SEED_ADMIN_PASSWORD
    generated = password is None
    if generated:
        password = secrets.token_urlsafe(12)

    create_db_and_tables()
    with Session(engine) as session:
        created = 0 if args.no_products else seed_products(session)
        admin, admin_created = ensure_admin(session, args.admin_email, password)

    logger.info("Seeded %d products", created)
    logger.info("Admin account: %s", admin.email)
    if admin_created and generated:
        print(f"Generated admin password: {password}")


if __name__ == "__main__":
    main()
