"""
Locust Load Test Suite

Rooms are created by admins, so seed at least one available room first
(POST /api/v1/rooms/ with an admin token). Set LOAD_ROOM_ID to pin the
concurrency scenario to a specific room; otherwise the first available
room in the catalog is used.

Run scenarios:
  locust -f locustfile.py --tags concurrency  # Test double booking
  locust -f locustfile.py --tags throughput   # Test cache
  locust -f locustfile.py --tags edge         # Test bad input
  locust -f locustfile.py                     # All tests
"""

import os
import random
from datetime import date, timedelta

from locust import HttpUser, between, events, tag, task

# Shared state
ROOM_IDS = []
CONCURRENCY_ROOM_ID = int(os.environ["LOAD_ROOM_ID"]) if os.environ.get("LOAD_ROOM_ID") else None
# Everyone races for the same five nights
RACE_CHECK_IN = date.today() + timedelta(days=60)
RACE_CHECK_OUT = RACE_CHECK_IN + timedelta(days=5)


def random_email():
    return f"load_{random.randint(10000, 999999)}@test.com"


def random_stay():
    check_in = date.today() + timedelta(days=random.randint(1, 365))
    return check_in, check_in + timedelta(days=random.randint(1, 7))


def booking_payload(room_id, check_in, check_out, guests=1):
    return {
        "room_id": room_id,
        "check_in": check_in.isoformat(),
        "check_out": check_out.isoformat(),
        "guests": guests,
    }


def register_and_login(client):
    """Create a throwaway guest and return auth headers (empty on failure)."""
    email = random_email()
    password = "loadtest-password"
    client.post("/api/v1/auth/register", json={
        "email": email,
        "first_name": "Load",
        "last_name": "Tester",
        "password": password,
    })
    resp = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    if resp.status_code == 200:
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}
    return {}


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "=" * 60)
    print(f"Race window: {RACE_CHECK_IN} -> {RACE_CHECK_OUT}")
    print("=" * 60)


class ConcurrencyUser(HttpUser):
    """
    TEST 1: Concurrency - 100 guests, one room, one date range

    Run: locust -f locustfile.py --tags concurrency -u 100 -r 50 --run-time 30s

    After test, verify:
      SELECT COUNT(*) FROM bookings
      WHERE room_id = X AND status IN ('pending', 'confirmed')
        AND check_in < 'RACE_CHECK_OUT' AND check_out > 'RACE_CHECK_IN';
    Should be exactly 1
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        global CONCURRENCY_ROOM_ID
        self.headers = register_and_login(self.client)

        if CONCURRENCY_ROOM_ID is None:
            resp = self.client.get("/api/v1/rooms/?available_only=true")
            if resp.status_code == 200 and resp.json():
                CONCURRENCY_ROOM_ID = resp.json()[0]["id"]
                print(f"\nRacing for room {CONCURRENCY_ROOM_ID}\n")

    @tag("concurrency")
    @task
    def book_same_dates(self):
        """All guests fight for the same nights."""
        if not CONCURRENCY_ROOM_ID or not self.headers:
            return

        with self.client.post("/api/v1/bookings/",
            json=booking_payload(CONCURRENCY_ROOM_ID, RACE_CHECK_IN, RACE_CHECK_OUT),
            headers=self.headers,
            catch_response=True
        ) as resp:
            if resp.status_code == 201:
                resp.success()
            elif resp.status_code == 409:
                resp.success()  # Expected: dates taken
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - Cache effectiveness

    Run twice:
      1. With Redis: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
      2. Without Redis: Stop Redis, run again

    Compare:
      - Avg response time
      - Requests/sec
      - P95/P99 latency
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def list_rooms_cached(self):
        """Hammer the cached endpoint."""
        min_capacity = random.randint(1, 4)
        resp = self.client.get(f"/api/v1/rooms/?available_only=true&min_capacity={min_capacity}",
            name="/api/v1/rooms/ [cached]")
        if resp.status_code == 200:
            for room in resp.json():
                if room["id"] not in ROOM_IDS:
                    ROOM_IDS.append(room["id"])

    @tag("throughput", "read")
    @task(3)
    def check_availability(self):
        """Uncached: availability always hits the database."""
        if ROOM_IDS:
            check_in, check_out = random_stay()
            self.client.get(f"/api/v1/rooms/{random.choice(ROOM_IDS)}/availability",
                params={"check_in": check_in.isoformat(), "check_out": check_out.isoformat()},
                name="/api/v1/rooms/{id}/availability")

    @tag("throughput")
    @task(1)
    def health_check(self):
        """Monitor system health."""
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def on_start(self):
        self.headers = register_and_login(self.client)

    def _expect(self, payload, allowed, **kwargs):
        with self.client.post("/api/v1/bookings/",
            json=payload,
            headers=kwargs.get("headers", self.headers),
            catch_response=True
        ) as resp:
            if resp.status_code in allowed:
                resp.success()
            else:
                resp.failure(f"Expected {allowed}, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_room(self):
        check_in, check_out = random_stay()
        self._expect(booking_payload(999999, check_in, check_out), [404])

    @tag("edge")
    @task
    def reversed_dates(self):
        check_in, check_out = random_stay()
        self._expect(booking_payload(1, check_out, check_in), [422])

    @tag("edge")
    @task
    def zero_nights(self):
        check_in, _ = random_stay()
        self._expect(booking_payload(1, check_in, check_in), [422])

    @tag("edge")
    @task
    def zero_guests(self):
        check_in, check_out = random_stay()
        self._expect(booking_payload(1, check_in, check_out, guests=0), [422])

    @tag("edge")
    @task
    def huge_party(self):
        """Capacity check: 404 if room 1 is missing, 409 if it is withdrawn."""
        check_in, check_out = random_stay()
        self._expect(booking_payload(1, check_in, check_out, guests=999), [404, 409, 422])

    @tag("edge")
    @task
    def malformed_json(self):
        """Send garbage data."""
        with self.client.post("/api/v1/bookings/",
            data="not json at all",
            headers=self.headers,
            catch_response=True
        ) as resp:
            if resp.status_code in [400, 422]:
                resp.success()
            else:
                resp.failure(f"Expected 400/422, got {resp.status_code}")

    @tag("edge")
    @task
    def missing_auth(self):
        """Try booking without auth."""
        check_in, check_out = random_stay()
        self._expect(booking_payload(1, check_in, check_out), [401], headers={})


class RealisticUser(HttpUser):
    """
    TEST 4: Realistic mixed workload

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s

    Simulates real traffic:
      - Mostly browsing and availability checks
      - Some bookings (conflicts are expected and fine)
      - Occasional cancellations
    """
    wait_time = between(1, 3)

    def on_start(self):
        self.headers = register_and_login(self.client)
        self.my_bookings = []

    @task(50)
    def browse_rooms(self):
        """Most common: browsing."""
        resp = self.client.get("/api/v1/rooms/")
        if resp.status_code == 200:
            for room in resp.json():
                if room["id"] not in ROOM_IDS:
                    ROOM_IDS.append(room["id"])

    @task(20)
    def quote_stay(self):
        if ROOM_IDS:
            check_in, check_out = random_stay()
            self.client.get(f"/api/v1/rooms/{random.choice(ROOM_IDS)}/quote",
                params={"check_in": check_in.isoformat(), "check_out": check_out.isoformat()},
                name="/api/v1/rooms/{id}/quote")

    @task(10)
    def book_room(self):
        """Occasional booking."""
        if ROOM_IDS and self.headers:
            check_in, check_out = random_stay()
            with self.client.post("/api/v1/bookings/",
                json=booking_payload(random.choice(ROOM_IDS), check_in, check_out),
                headers=self.headers,
                catch_response=True
            ) as resp:
                if resp.status_code == 201:
                    self.my_bookings.append(resp.json()["id"])
                    resp.success()
                elif resp.status_code in (409, 422):
                    resp.success()

    @task(3)
    def cancel_booking(self):
        """Rare: cancel one of our own stays."""
        if self.my_bookings:
            booking_id = self.my_bookings.pop()
            self.client.patch(f"/api/v1/bookings/{booking_id}/cancel",
                headers=self.headers,
                name="/api/v1/bookings/{id}/cancel")
