"""Shipping load test scenarios.

Order intake through courier push as a SequentialTaskSet, plus a
read-heavy operator journey over the city directory. Run the target
service with ``COURIER_ADAPTER=fake`` unless LCS staging can take the load.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import city_query, product_weight_data, register_order_data
from loadtests.helpers.response import extract_error_detail, failed_bookings
from loadtests.helpers.state import ShipmentState


class OrderToCourierJourney(SequentialTaskSet):
    """Register order → record weights → push to LCS → fix city if needed."""

    def on_start(self):
        self.state = ShipmentState()

    @task
    def register_order(self):
        payload = register_order_data()
        with self.client.post("/orders", json=payload, catch_response=True, name="POST /orders") as resp:
            if resp.status_code == 201:
                self.state.order_id = resp.json()["order_id"]
                self.state.product_ids = [item["product_id"] for item in payload["items"]]
            else:
                resp.failure(f"Order registration failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def record_weights(self):
        for product_id in self.state.product_ids:
            with self.client.put(
                f"/orders/products/{product_id}/weight",
                json=product_weight_data(),
                catch_response=True,
                name="PUT /orders/products/{id}/weight",
            ) as resp:
                if resp.status_code != 200:
                    resp.failure(f"Weight update failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def push_to_courier(self):
        with self.client.post(
            "/courier/lcs/push",
            json={"orderIds": [self.state.order_id]},
            catch_response=True,
            name="POST /courier/lcs/push",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Push failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()
                return
            result = resp.json()["results"][0]
            self.state.booked = result["ok"]
            self.state.needs_city = result.get("code") == "UNSERVICEABLE_CITY" and bool(result.get("suggestions"))
            if not result["ok"] and not self.state.needs_city:
                # provider rejections are expected against the fake adapter
                resp.success()

    @task
    def resolve_city_manually(self):
        if not self.state.needs_city:
            self.interrupt()
            return
        with self.client.get(
            "/courier/lcs/suggest",
            params={"q": "Lah", "limit": 5},
            catch_response=True,
            name="GET /courier/lcs/suggest",
        ) as resp:
            suggestions = resp.json().get("data", []) if resp.status_code == 200 else []
        if not suggestions:
            self.interrupt()
            return
        pick = suggestions[0]
        with self.client.post(
            "/courier/lcs/resolve-city",
            json={"orderId": self.state.order_id, "lcsCityId": pick["id"], "lcsCityName": pick["name"]},
            catch_response=True,
            name="POST /courier/lcs/resolve-city",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Manual resolution failed: {resp.status_code} — {extract_error_detail(resp)}")
        self.interrupt()


class CityDirectoryBrowsing(SequentialTaskSet):
    """Operator typing into the city picker."""

    @task
    def suggest(self):
        for _ in range(random.randint(1, 4)):
            with self.client.get(
                "/courier/lcs/suggest",
                params={"q": city_query()},
                catch_response=True,
                name="GET /courier/lcs/suggest",
            ) as resp:
                if resp.status_code != 200:
                    resp.failure(f"Suggest failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def list_cities(self):
        with self.client.get("/courier/lcs/cities", catch_response=True, name="GET /courier/lcs/cities") as resp:
            if resp.status_code != 200:
                resp.failure(f"City listing failed: {resp.status_code} — {extract_error_detail(resp)}")
        self.interrupt()


class ShippingUser(HttpUser):
    """Mostly order intake and booking, some operator browsing."""

    wait_time = between(0.5, 2)
    tasks = {OrderToCourierJourney: 4, CityDirectoryBrowsing: 1}
