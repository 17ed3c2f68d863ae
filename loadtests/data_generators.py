"""Faker-based data generators for Locust load test scenarios.

Payloads match the field names of the shipping API's Pydantic request
schemas. Cities mix clean names, misspellings and unknown places so the
resolver's exact, fuzzy and suggestion paths are all exercised.
"""

import random
import uuid

from faker import Faker

fake = Faker()

CLEAN_CITIES = ["Lahore", "Karachi", "Islamabad", "Rawalpindi", "Faisalabad", "Multan", "Peshawar"]
NOISY_CITIES = ["lahore cantt", "KHI", "Isb", "Lahor", "karachi-east", "Rwp"]

PRODUCT_TITLES = [
    "Wireless Mouse [Sale!]",
    "Original Leather Wallet (Pack of 2)",
    "Premium Cotton T-Shirt",
    "Steel Water Bottle 1L",
    "Brand New Bluetooth Speaker XB-200",
]


def unique_order_ref() -> str:
    """Generate storefront references like 'WEB-LT-a1b2c3d4'."""
    return f"WEB-LT-{uuid.uuid4().hex[:8]}"


def mobile_number() -> str:
    """Local mobile numbers in the 03xx-xxxxxxx shape."""
    return f"03{random.randint(0, 4)}{random.randint(0, 9)}-{random.randint(1000000, 9999999)}"


def destination_city() -> str:
    return random.choice(CLEAN_CITIES) if random.random() < 0.7 else random.choice(NOISY_CITIES)


def order_line() -> dict:
    return {
        "product_id": f"prod-lt-{random.randint(1, 50)}",
        "title": random.choice(PRODUCT_TITLES),
        "count": random.randint(1, 3),
        "price": round(random.uniform(300, 5000), 2),
        "selected_variants": random.choice(
            [[], [{"name": "Color", "value": fake.color_name()}], [{"name": "Size", "value": "XL"}]]
        ),
    }


def register_order_data() -> dict:
    """Generate a RegisterOrderRequest payload."""
    items = [order_line() for _ in range(random.randint(1, 3))]
    return {
        "order_ref": unique_order_ref(),
        "total_price": round(sum(item["price"] * item["count"] for item in items), 2),
        "delivery_charges": random.choice([0, 150, 250]),
        "shipping_address": {
            "full_name": fake.name()[:200],
            "city": destination_city(),
            "street_address": fake.street_address()[:500],
            "mobile": mobile_number(),
            "additional_instructions": random.choice(["", "Call before delivery", "Leave at reception"]),
        },
        "items": items,
    }


def product_weight_data() -> dict:
    return {"weight": random.choice([150, 200, 350, 500, 1200]), "title": random.choice(PRODUCT_TITLES)}


def city_query() -> str:
    return random.choice(CLEAN_CITIES + NOISY_CITIES)[: random.randint(2, 8)]
