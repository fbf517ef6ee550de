"""Fixed sample dataset.

Foreign-key values are 1-based positions in the referenced table's list
below, not database ids; the loader resolves them after each insert.
"""
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Optional

from app.domain.models import utcnow

D = Decimal

# (first_name, last_name, email, phone, password_hash, role)
USERS = [
    ("Wiltord", "Ichingwa", "wiltord@example.com", "0711111111", "passhash1", "customer"),
    ("Shalom", "Wambui", "shalom@example.com", "0711111112", "passhash2", "customer"),
    ("Kelvin", "Gethurware", "kelvin@example.com", "0711111113", "passhash3", "customer"),
    ("Kigoro", "Njoroge", "kigoro@example.com", "0711111114", "passhash4", "customer"),
    ("Sammy", "Kibet", "sammy@example.com", "0711111115", "passhash5", "customer"),
    ("Abdullahi", "Hassan", "abdullahi@example.com", "0711111116", "passhash6", "customer"),
    ("Simon", "Mutua", "simon@example.com", "0711111117", "passhash7", "customer"),
    ("Linda", "Chebet", "linda@example.com", "0711111118", "passhash8", "customer"),
    ("Peter", "Otieno", "peter@example.com", "0711111119", "passhash9", "customer"),
    ("Fatma", "Ahmed", "fatma@example.com", "0711111120", "passhash10", "customer"),
    ("Ayla", "Abdullahi", "ayla.admin@example.com", "0722222221", "adminpass1", "admin"),
    ("Usman", "Ali", "usman.admin@example.com", "0722222222", "adminpass2", "admin"),
]

SUPPLIERS = [
    ("TechWorld Ltd", "info@techworld.com", "0711111131", "Nairobi, Kenya"),
    ("HomeStyle Supplies", "contact@homestyle.com", "0722222242", "Mombasa, Kenya"),
    ("Fashion Hub", "support@fashionhub.com", "0733333353", "Kisumu, Kenya"),
]

CATEGORIES = [
    ("Electronics", "Phones, laptops, and gadgets"),
    ("Home Appliances", "Appliances for home use"),
    ("Fashion", "Clothing and accessories"),
    ("Books", "Educational and entertainment books"),
    ("Sports", "Sporting goods and equipment"),
]

# (sku, name, description, price, supplier position or None), five per category
PRODUCTS = [
    ("ELEC001", "Samsung Galaxy S23", "Smartphone with AMOLED display", D("10950.00"), 1),
    ("ELEC002", "iPhone 14", "Apple smartphone with iOS", D("111200.00"), 1),
    ("ELEC003", "Dell XPS 13", "Lightweight laptop", D("21500.00"), 1),
    ("ELEC004", "HP Pavilion", "Budget-friendly laptop", D("900.00"), 1),
    ("ELEC005", "Sony WH-1000XM4", "Noise cancelling headphones", D("350.00"), 1),
    ("HOME001", "Samsung Refrigerator", "Double-door fridge", D("800.00"), 2),
    ("HOME002", "LG Washing Machine", "Front load washing machine", D("700.00"), 2),
    ("HOME003", "Philips Blender", "Kitchen blender", D("120.00"), 2),
    ("HOME004", "Ramtons Microwave", "20L microwave oven", D("180.00"), 2),
    ("HOME005", "Electric Kettle", "1.7L stainless steel kettle", D("50.00"), 2),
    ("FASH001", "Men T-Shirt", "Cotton T-shirt", D("20.00"), 3),
    ("FASH002", "Women Dress", "Casual dress", D("35.00"), 3),
    ("FASH003", "Sneakers", "Running shoes", D("70.00"), 3),
    ("FASH004", "Leather Jacket", "Black leather jacket", D("150.00"), 3),
    ("FASH005", "Cap", "Adjustable baseball cap", D("15.00"), 3),
    ("BOOK001", "Data Structures in C", "Programming book", D("25.00"), None),
    ("BOOK002", "Think Python", "Beginner Python book", D("30.00"), None),
    ("BOOK003", "Rich Dad Poor Dad", "Finance and personal growth", D("18.00"), None),
    ("BOOK004", "Atomic Habits", "Self improvement book", D("22.00"), None),
    ("BOOK005", "The Alchemist", "Fiction novel", D("15.00"), None),
    ("SPORT001", "Football", "Standard size 5 ball", D("25.00"), 2),
    ("SPORT002", "Tennis Racket", "Professional racket", D("80.00"), 2),
    ("SPORT003", "Yoga Mat", "Non-slip mat", D("20.00"), 2),
    ("SPORT004", "Dumbbell Set", "Adjustable dumbbells", D("120.00"), 2),
    ("SPORT005", "Cycling Helmet", "Safety helmet", D("45.00"), 2),
]

PRODUCTS_PER_CATEGORY = 5

STOCK = [
    50, 40, 30, 25, 60,
    15, 20, 50, 35, 70,
    100, 60, 45, 20, 150,
    200, 180, 170, 160, 190,
    80, 25, 90, 30, 40,
]

# (user position, street, city, country, postal_code), one per customer
ADDRESSES = [
    (1, "Moi Avenue", "Nairobi", "Kenya", "00100"),
    (2, "Tom Mboya Street", "Nairobi", "Kenya", "00100"),
    (3, "Mama Ngina Drive", "Mombasa", "Kenya", "80100"),
    (4, "Kenyatta Avenue", "Nakuru", "Kenya", "20100"),
    (5, "Eldoret Road", "Eldoret", "Kenya", "30100"),
    (6, "Kisumu Central", "Kisumu", "Kenya", "40100"),
    (7, "Thika Superhighway", "Thika", "Kenya", "10200"),
    (8, "Nyeri Town", "Nyeri", "Kenya", "10100"),
    (9, "Machakos Road", "Machakos", "Kenya", "90100"),
    (10, "Kericho Street", "Kericho", "Kenya", "20200"),
]

# (user, shipping address, billing address, status, subtotal, shipping_fee, tax, total, placed_at)
ORDERS = [
    (1, 1, 1, "delivered", D("1100.00"), D("50.00"), D("50.00"), D("1200.00"), datetime(2025, 8, 30, 12, 10)),
    (2, 2, 2, "pending", D("900.00"), D("30.00"), D("20.00"), D("950.00"), datetime(2025, 8, 31, 15, 20)),
    (3, 3, 3, "shipped", D("160.00"), D("10.00"), D("10.00"), D("180.00"), datetime(2025, 9, 1, 10, 30)),
    (4, 4, 4, "processing", D("60.00"), D("5.00"), D("5.00"), D("70.00"), datetime(2025, 9, 2, 9, 45)),
    (5, 5, 5, "delivered", D("30.00"), D("3.00"), D("2.00"), D("35.00"), datetime(2025, 9, 3, 14, 0)),
]

# (order, product, quantity, unit_price)
ORDER_ITEMS = [
    (1, 2, 1, D("111200.00")),
    (2, 1, 1, D("10950.00")),
    (3, 8, 1, D("120.00")),
    (3, 10, 1, D("60.00")),
    (4, 13, 1, D("70.00")),
    (5, 12, 1, D("35.00")),
]

# (order, method, status, amount, transaction_reference, paid_at)
PAYMENTS = [
    (1, "mpesa", "completed", D("1200.00"), "TXN12345", datetime(2025, 9, 1, 10, 5)),
    (2, "card", "pending", D("950.00"), "TXN12346", datetime(2025, 9, 2, 15, 40)),
    (3, "mpesa", "completed", D("180.00"), "TXN12347", datetime(2025, 9, 3, 11, 50)),
    (4, "bank_transfer", "completed", D("70.00"), "TXN12348", datetime(2025, 9, 4, 9, 25)),
    (5, "paypal", "completed", D("35.00"), "TXN12349", datetime(2025, 9, 5, 14, 15)),
]

# (product, image_url, alt_text, is_primary)
PRODUCT_IMAGES = [
    (1, "https://www.theverge.com/21250695/best-laptops", "laptop", True),
    (2, "https://pixabay.com/images/search/phone/", "phone back view", True),
    (3, "https://www.ifixit.com/Guide/Samsung+Galaxy+S24+Ultra+Back+Cover+Replacement/175691", None, False),
    (8, "https://www.cubavera.com/products/ombre-embroidery-panel-shirt-white-cuwsf020ds-112", "Casual Shirt", True),
    (13, "https://images.unsplash.com/photo-1541963463532-d68292c34b19?w=500&auto=format&fit=crop&q=60&ixlib=rb-4.1.0&ixid=M3wxMjA3fDB8MHxzZWFyY2h8M3x8Ym9va3xlbnwwfHwwfHx8MA%3D%3D", "Bestseller Book", True),
]

# (product, user, rating, title, body, days before reference time)
REVIEWS = [
    (1, 2, 5, "Excellent Laptop", "This laptop is super fast and lightweight, perfect for work and gaming.", 0),
    (3, 5, 4, "Good Phone but...", "Great display and camera, but the battery drains quickly.", 2),
    (5, 4, 3, "Average Headphones", "Sound quality is decent but uncomfortable for long use.", 5),
    (7, 3, 5, "Amazing Shoes", "Fit perfectly and the design is stylish, highly recommended!", 7),
    (2, 6, 2, "Disappointing TV", "The screen resolution is not as advertised and the sound is poor.", 10),
]

# (product, old_price, new_price, days before reference time, changed_by user)
PRICE_HISTORY = [
    (1, D("950.00"), D("899.00"), 15, 1),
    (3, D("520.00"), D("499.00"), 10, 2),
    (5, D("75.00"), D("70.00"), 7, 3),
    (7, D("120.00"), D("110.00"), 20, 1),
    (2, D("1500.00"), D("1400.00"), 30, 4),
]


def build_seed_rows(reference_time: Optional[datetime] = None) -> dict[str, list[dict[str, Any]]]:
    """Return the seed rows keyed by table name.

    ``reference_time`` anchors the review and price-history timestamps,
    which are expressed as offsets in days.
    """
    now = reference_time or utcnow()
    return {
        "users": [
            dict(first_name=f, last_name=l, email=e, phone=p, password_hash=h, role=r)
            for f, l, e, p, h, r in USERS
        ],
        "suppliers": [
            dict(name=n, contact_email=e, contact_phone=p, address=a)
            for n, e, p, a in SUPPLIERS
        ],
        "categories": [dict(name=n, description=d) for n, d in CATEGORIES],
        "products": [
            dict(sku=s, name=n, description=d, price=price, supplier_id=supplier)
            for s, n, d, price, supplier in PRODUCTS
        ],
        "product_categories": [
            dict(product_id=position, category_id=(position - 1) // PRODUCTS_PER_CATEGORY + 1)
            for position in range(1, len(PRODUCTS) + 1)
        ],
        "inventory": [
            dict(product_id=position, quantity=quantity)
            for position, quantity in enumerate(STOCK, start=1)
        ],
        "addresses": [
            dict(user_id=u, street=s, city=c, country=country, postal_code=pc)
            for u, s, c, country, pc in ADDRESSES
        ],
        "orders": [
            dict(user_id=u, shipping_address_id=sa, billing_address_id=ba, order_status=st,
                 subtotal=sub, shipping_fee=fee, tax=tax, total=total, placed_at=placed)
            for u, sa, ba, st, sub, fee, tax, total, placed in ORDERS
        ],
        "order_items": [
            dict(order_id=o, product_id=p, quantity=q, unit_price=price)
            for o, p, q, price in ORDER_ITEMS
        ],
        "payments": [
            dict(order_id=o, payment_method=m, status=st, amount=amount,
                 transaction_reference=ref, paid_at=paid, payment_date=paid)
            for o, m, st, amount, ref, paid in PAYMENTS
        ],
        "product_images": [
            dict(product_id=p, image_url=url, alt_text=alt, is_primary=primary)
            for p, url, alt, primary in PRODUCT_IMAGES
        ],
        "reviews": [
            dict(product_id=p, user_id=u, rating=r, title=t, body=b, created_at=now - timedelta(days=days))
            for p, u, r, t, b, days in REVIEWS
        ],
        "product_price_history": [
            dict(product_id=p, old_price=old, new_price=new, changed_at=now - timedelta(days=days), changed_by=by)
            for p, old, new, days, by in PRICE_HISTORY
        ],
    }
