"""Application tests for recording product shipping weights."""

from protean import current_domain
from shipping.product.weight import ProductWeight, RecordProductWeight, weights_for


def _record(product_id, weight, title=None):
    return current_domain.process(
        RecordProductWeight(product_id=product_id, weight=weight, title=title),
        asynchronous=False,
    )


class TestRecordProductWeight:
    def test_creates_weight(self):
        assert _record("p-mouse", 200, "Wireless Mouse") == "p-mouse"
        product = current_domain.repository_for(ProductWeight).get("p-mouse")
        assert product.weight == 200
        assert product.title == "Wireless Mouse"

    def test_updates_existing_weight(self):
        _record("p-mouse", 200, "Wireless Mouse")
        _record("p-mouse", 250)

        product = current_domain.repository_for(ProductWeight).get("p-mouse")
        assert product.weight == 250
        assert product.title == "Wireless Mouse"


class TestWeightsFor:
    def test_returns_known_weights_only(self):
        _record("p-mouse", 200)
        _record("p-lamp", 1200)
        assert weights_for(["p-mouse", "p-lamp", "p-unknown", None]) == {"p-mouse": 200, "p-lamp": 1200}

    def test_empty_input(self):
        assert weights_for([]) == {}
