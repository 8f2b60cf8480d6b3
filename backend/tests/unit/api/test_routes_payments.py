"""Unit tests for the payment success callback endpoint."""

import datetime as dt

from fastapi.testclient import TestClient
from starlette.status import (
    HTTP_200_OK,
    HTTP_201_CREATED,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
)

from booking_core.models import PaymentStatus, ReservationStatus

TODAY = dt.date(2025, 5, 20)
RES_ID = "RES-2025-TEST0001"
USER_HEADERS = {"x-user-id": "user-123"}
ADMIN_HEADERS = {"x-user-id": "admin-1", "x-user-role": "ADMIN"}
SYSTEM_HEADERS = {"x-user-id": "payment-gateway", "x-user-role": "SYSTEM"}


def _in_days(days: int) -> dt.date:
    return TODAY + dt.timedelta(days=days)


class TestRecordPayment:
    """Tests for POST /api/reservations/{id}/payment."""

    def test_pending_reservation_confirmed(
        self, client: TestClient, reservation_store, reservation_factory, payments
    ) -> None:
        reservation_store.add(
            reservation_factory(
                status=ReservationStatus.PENDING, payment_status=PaymentStatus.PENDING
            )
        )

        response = client.post(
            f"/api/reservations/{RES_ID}/payment",
            json={"provider_transaction_id": "pi_test_123"},
            headers=SYSTEM_HEADERS,
        )

        assert response.status_code == HTTP_200_OK
        data = response.json()
        assert data["status"] == "CONFIRMED"
        assert data["payment_status"] == "COMPLETED"
        charge = payments.charges[RES_ID]
        assert charge.amount == 200000
        assert charge.provider_transaction_id == "pi_test_123"

    def test_body_optional(
        self, client: TestClient, reservation_store, reservation_factory, payments
    ) -> None:
        reservation_store.add(
            reservation_factory(
                status=ReservationStatus.PENDING, payment_status=PaymentStatus.PENDING
            )
        )

        response = client.post(f"/api/reservations/{RES_ID}/payment", headers=ADMIN_HEADERS)

        assert response.status_code == HTTP_200_OK
        assert payments.charges[RES_ID].provider_transaction_id is None

    def test_guest_cannot_report_payment(
        self, client: TestClient, reservation_store, reservation_factory, payments
    ) -> None:
        reservation_store.add(
            reservation_factory(
                status=ReservationStatus.PENDING, payment_status=PaymentStatus.PENDING
            )
        )

        response = client.post(f"/api/reservations/{RES_ID}/payment", headers=USER_HEADERS)

        assert response.status_code == HTTP_403_FORBIDDEN
        assert response.json()["error_code"] == "ERR_008"
        assert payments.charges == {}

    def test_anonymous_rejected(self, client: TestClient) -> None:
        response = client.post(f"/api/reservations/{RES_ID}/payment")

        assert response.status_code == HTTP_401_UNAUTHORIZED

    def test_unknown_reservation(self, client: TestClient) -> None:
        response = client.post(
            "/api/reservations/RES-2025-MISSING0/payment", headers=SYSTEM_HEADERS
        )

        assert response.status_code == HTTP_404_NOT_FOUND

    def test_cancelled_reservation_refused(
        self, client: TestClient, reservation_store, reservation_factory, payments
    ) -> None:
        reservation_store.add(
            reservation_factory(
                status=ReservationStatus.CANCELLED, payment_status=PaymentStatus.CANCELLED
            )
        )

        response = client.post(f"/api/reservations/{RES_ID}/payment", headers=SYSTEM_HEADERS)

        assert response.status_code == HTTP_409_CONFLICT
        assert response.json()["error_code"] == "ERR_004"
        assert payments.charges == {}


class TestPaidCancellation:
    """A payment reported through the API makes a later cancel refundable."""

    def test_book_pay_cancel_refunds_total(self, client: TestClient, payments) -> None:
        created = client.post(
            "/api/reservations",
            json={
                "room_id": "room-101",
                "check_in": _in_days(10).isoformat(),
                "check_out": _in_days(12).isoformat(),
                "options": {},
            },
            headers=USER_HEADERS,
        )
        assert created.status_code == HTTP_201_CREATED
        reservation_id = created.json()["reservation_id"]
        total = created.json()["total_price"]

        paid = client.post(f"/api/reservations/{reservation_id}/payment", headers=SYSTEM_HEADERS)
        assert paid.status_code == HTTP_200_OK

        cancelled = client.patch(
            f"/api/reservations/{reservation_id}/cancel", headers=USER_HEADERS
        )

        assert cancelled.status_code == HTTP_200_OK
        body = cancelled.json()
        assert body["status"] == "CANCELLED"
        assert body["payment_status"] == "REFUNDED"
        assert body["refund_rate"] == 100
        assert body["refund_amount"] == total
        assert body["refund_id"] == "TXN-REFUND0001"
        assert payments.refunds == [(reservation_id, total, None)]
