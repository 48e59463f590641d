from services.store_service.schemas import ProductCreate


class RecordingProducer:
    """Stands in for BaseKafkaProducer; keeps published events in memory."""

    def __init__(self):
        self.published = []

    def publish(self, topic, event):
        self.published.append((topic, event))

    def close(self):
        pass


def product_data(code: str, **overrides) -> ProductCreate:
    fields = {
        "title": f"Product {code}",
        "description": "Test product",
        "code": code,
        "price": 10.0,
        "category": "misc",
        "stock": 5,
    }
    fields.update(overrides)
    return ProductCreate(**fields)
