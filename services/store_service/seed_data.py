import logging

from sqlalchemy.orm import Session

from .product_repository import ProductRepository

logger = logging.getLogger(__name__)

# (title, description, code, price, stock, category)
SAMPLE_PRODUCTS = [
    ("Wireless Headphones", "Premium noise-cancelling headphones", "AUD-001", 149.99, 25, "audio"),
    ("USB-C Cable", "Durable 6ft USB-C charging cable", "CAB-001", 12.99, 120, "cables"),
    ("HDMI Cable", "4K HDMI 2.1 cable", "CAB-002", 15.99, 0, "cables"),
    ("Phone Case", "Protective phone case with shock absorption", "PHN-001", 19.99, 60, "phone accessories"),
    ("Screen Protector", "Tempered glass screen protector", "PHN-002", 9.99, 0, "phone accessories"),
    ("Power Bank", "30000mAh portable power bank", "PWR-001", 49.99, 35, "power"),
    ("Laptop Stand", "Adjustable aluminum laptop stand", "DSK-001", 39.99, 18, "desk"),
    ("Mechanical Keyboard", "RGB mechanical gaming keyboard", "KEY-001", 99.99, 12, "peripherals"),
    ("Mouse Pad", "Large extended mouse pad with non-slip base", "PER-002", 24.99, 40, "peripherals"),
    ("Webcam", "1080p HD webcam with microphone", "PER-003", 59.99, 0, "peripherals"),
    ("Desk Lamp", "LED desk lamp with adjustable brightness", "DSK-002", 34.99, 22, "desk"),
    ("External SSD 1TB", "1TB portable SSD with USB 3.1", "STO-001", 129.99, 9, "storage"),
]


def seed_products(db: Session) -> int:
    """Insert sample products whose code is not taken yet. Returns the number inserted."""
    logger.info("Seeding products...")
    repo = ProductRepository(db)
    inserted = 0

    for title, description, code, price, stock, category in SAMPLE_PRODUCTS:
        if repo.get_by_code(code):
            logger.info(f"Product {code} already exists, skipping")
            continue
        repo.create_product(
            title=title,
            description=description,
            code=code,
            price=price,
            stock=stock,
            category=category,
            status=True,
            thumbnails=[],
        )
        inserted += 1

    db.commit()
    logger.info(f"Seeded {inserted} products")
    return inserted
