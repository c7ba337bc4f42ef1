"""
Tests for the reservation booking protocol.
"""

import sqlite3
import threading
from datetime import date

import pytest

from blueprints.hotel.services import ReservationService
from database import connect
from models.errors import (
    ClientNotFoundError, DateRangeConflictError, InvalidDateRangeError, PersistenceError,
    ReservationNotFoundError, RoomNotFoundError, RoomUnavailableError
)
from models.room import RoomRepository

TODAY = date(2025, 5, 1)


def count_reservations(db):
    return db.execute('SELECT COUNT(*) FROM reserves').fetchone()[0]


@pytest.fixture
def service(db, hotel_data, today):
    """Service with the availability gate on (default)."""
    return ReservationService(db, today=today)


@pytest.fixture
def lenient_service(db, hotel_data, today):
    """Service that only refuses overlapping stays."""
    return ReservationService(db, today=today, strict_availability=False)


@pytest.fixture
def room_101(db):
    """Room 101 at 100.0 per night."""
    db.execute('UPDATE habitacions SET preu_per_nit = 100.0 WHERE numero_habitacio = 101')
    db.commit()
    return 101


class TestBookRoom:
    """Tests for book_room."""

    def test_book_success(self, service, hotel_data, room_101, db):
        """A valid booking is stored, priced, and flips the room flag."""
        reservation = service.book_room(101, hotel_data['anna'], date(2025, 6, 1), date(2025, 6, 4))

        assert reservation.id is not None
        assert reservation.total == 300.0
        assert reservation.nights == 3
        assert reservation.room.available is False
        assert RoomRepository(db).get(101).available is False

        stored = service.get_reservation(reservation.id)
        assert stored.check_in == date(2025, 6, 1)
        assert stored.check_out == date(2025, 6, 4)
        assert stored.client.id == hotel_data['anna']

    def test_book_accepts_iso_strings(self, service, hotel_data):
        """Dates may be passed as YYYY-MM-DD strings."""
        reservation = service.book_room(102, hotel_data['jordi'], '2025-07-01', '2025-07-03')
        assert reservation.total == 300.0

    def test_stored_total_matches_computed(self, service, hotel_data, db):
        """The persisted total equals nights times the nightly price."""
        reservation = service.book_room(101, hotel_data['anna'], '2025-06-01', '2025-06-06')
        row = db.execute(
            'SELECT total_a_pagar FROM reserves WHERE id_reserva = ?', (reservation.id,)
        ).fetchone()
        assert row['total_a_pagar'] == 400.0

    def test_room_not_found(self, service, hotel_data, db):
        """Unknown room fails without creating anything."""
        with pytest.raises(RoomNotFoundError):
            service.book_room(999, hotel_data['anna'], '2025-06-01', '2025-06-04')
        assert count_reservations(db) == 0

    def test_client_not_found(self, service, db):
        """Unknown client fails without creating anything."""
        with pytest.raises(ClientNotFoundError):
            service.book_room(101, 9999, '2025-06-01', '2025-06-04')
        assert count_reservations(db) == 0

    def test_check_in_after_check_out(self, service, hotel_data, db):
        """Inverted range is refused."""
        with pytest.raises(InvalidDateRangeError):
            service.book_room(101, hotel_data['anna'], '2025-06-10', '2025-06-05')
        assert count_reservations(db) == 0

    def test_zero_night_stay(self, service, hotel_data):
        """Check-in equal to check-out is refused."""
        with pytest.raises(InvalidDateRangeError):
            service.book_room(101, hotel_data['anna'], '2025-06-10', '2025-06-10')

    def test_check_in_in_past(self, service, hotel_data):
        """Check-in before today is refused; today itself is accepted."""
        with pytest.raises(InvalidDateRangeError):
            service.book_room(101, hotel_data['anna'], '2025-04-30', '2025-05-02')

        reservation = service.book_room(101, hotel_data['anna'], TODAY, date(2025, 5, 2))
        assert reservation.nights == 1

    @pytest.mark.parametrize('check_in,check_out', [
        (None, '2025-06-04'),
        ('2025-06-01', None),
        ('', ''),
    ])
    def test_missing_dates(self, service, hotel_data, check_in, check_out):
        """Both dates are required."""
        with pytest.raises(InvalidDateRangeError):
            service.book_room(101, hotel_data['anna'], check_in, check_out)

    def test_malformed_date(self, service, hotel_data):
        """Dates must be YYYY-MM-DD."""
        with pytest.raises(InvalidDateRangeError):
            service.book_room(101, hotel_data['anna'], '01/06/2025', '2025-06-04')

    def test_unavailable_room_refused(self, service, hotel_data, db):
        """With the gate on, a room flagged unavailable takes no new booking."""
        RoomRepository(db).set_available(102, False)

        with pytest.raises(RoomUnavailableError):
            service.book_room(102, hotel_data['anna'], '2025-09-01', '2025-09-03')
        assert count_reservations(db) == 0


class TestOverlap:
    """Tests for the overlap law under half-open semantics."""

    @pytest.fixture
    def booked(self, lenient_service, hotel_data):
        """Room 101 booked 2025-06-10 to 2025-06-15."""
        return lenient_service.book_room(101, hotel_data['anna'], '2025-06-10', '2025-06-15')

    @pytest.mark.parametrize('check_in,check_out', [
        ('2025-06-08', '2025-06-11'),  # overlaps start
        ('2025-06-14', '2025-06-18'),  # overlaps end
        ('2025-06-11', '2025-06-13'),  # inside
        ('2025-06-05', '2025-06-20'),  # contains
        ('2025-06-10', '2025-06-15'),  # identical
    ])
    def test_overlap_always_conflicts(self, lenient_service, hotel_data, booked, db,
                                      check_in, check_out):
        """Any intersecting interval fails with a conflict naming the booking."""
        with pytest.raises(DateRangeConflictError) as exc_info:
            lenient_service.book_room(101, hotel_data['jordi'], check_in, check_out)

        assert [r.id for r in exc_info.value.conflicts] == [booked.id]
        assert count_reservations(db) == 1

    def test_overlap_reported_before_gate(self, service, hotel_data):
        """With the gate on, an overlapping request still reports the conflict."""
        service.book_room(101, hotel_data['anna'], '2025-06-10', '2025-06-15')

        with pytest.raises(DateRangeConflictError):
            service.book_room(101, hotel_data['jordi'], '2025-06-12', '2025-06-14')

    def test_adjoining_stays_allowed(self, lenient_service, hotel_data, booked):
        """Check-in on another stay's check-out day is accepted."""
        after = lenient_service.book_room(101, hotel_data['jordi'], '2025-06-15', '2025-06-17')
        before = lenient_service.book_room(101, hotel_data['jordi'], '2025-06-08', '2025-06-10')

        assert after.id != before.id

    def test_other_room_unaffected(self, lenient_service, hotel_data, booked):
        """Reservations of one room never conflict with another room."""
        reservation = lenient_service.book_room(102, hotel_data['jordi'], '2025-06-10', '2025-06-15')
        assert reservation.room.number == 102


class TestBookingScenario:
    """The room 101 walkthrough: book, conflict, adjoining booking."""

    def test_with_gate_off(self, lenient_service, hotel_data, room_101, db):
        """Adjoining booking succeeds once only overlaps are checked."""
        client_id = hotel_data['anna']

        first = lenient_service.book_room(101, client_id, '2025-06-01', '2025-06-04')
        assert first.total == 300.0
        assert RoomRepository(db).get(101).available is False

        with pytest.raises(DateRangeConflictError):
            lenient_service.book_room(101, client_id, '2025-06-03', '2025-06-05')

        second = lenient_service.book_room(101, client_id, '2025-06-04', '2025-06-06')
        assert second.total == 200.0

    def test_with_gate_on(self, service, hotel_data, room_101):
        """The first booking flips the flag, so the adjoining one is refused."""
        client_id = hotel_data['anna']

        service.book_room(101, client_id, '2025-06-01', '2025-06-04')

        with pytest.raises(DateRangeConflictError):
            service.book_room(101, client_id, '2025-06-03', '2025-06-05')

        with pytest.raises(RoomUnavailableError):
            service.book_room(101, client_id, '2025-06-04', '2025-06-06')


class TestCancelReservation:
    """Tests for cancel_reservation."""

    def test_round_trip(self, service, hotel_data, db):
        """Book then cancel restores the flag and leaves no trace in the listings."""
        rooms = RoomRepository(db)
        assert rooms.get(101).available is True

        reservation = service.book_room(101, hotel_data['anna'], '2025-06-01', '2025-06-04')
        cancelled = service.cancel_reservation(reservation.id)

        assert cancelled.id == reservation.id
        assert rooms.get(101).available is True
        assert service.list_active_reservations() == []
        assert service.list_reservations_for_client(hotel_data['anna']) == []

    def test_cancel_twice(self, service, hotel_data, db):
        """Second cancel fails with not found and changes nothing."""
        reservation = service.book_room(101, hotel_data['anna'], '2025-06-01', '2025-06-04')
        service.cancel_reservation(reservation.id)

        with pytest.raises(ReservationNotFoundError):
            service.cancel_reservation(reservation.id)
        assert RoomRepository(db).get(101).available is True
        assert count_reservations(db) == 0

    def test_cancel_unknown(self, service):
        """Unknown reservation fails with not found."""
        with pytest.raises(ReservationNotFoundError):
            service.cancel_reservation(12345)

    def test_room_kept_while_other_stay_active(self, lenient_service, hotel_data, db):
        """Cancelling one of two stays leaves the room unavailable."""
        first = lenient_service.book_room(101, hotel_data['anna'], '2025-06-01', '2025-06-04')
        lenient_service.book_room(101, hotel_data['jordi'], '2025-06-04', '2025-06-06')

        lenient_service.cancel_reservation(first.id)

        assert RoomRepository(db).get(101).available is False


class TestListings:
    """Tests for active and per-client listings."""

    def test_active_ordered_by_check_in(self, lenient_service, hotel_data):
        """Active reservations come back by check-in date."""
        late = lenient_service.book_room(101, hotel_data['anna'], '2025-08-01', '2025-08-03')
        early = lenient_service.book_room(102, hotel_data['jordi'], '2025-06-01', '2025-06-03')

        active = lenient_service.list_active_reservations()

        assert [r.id for r in active] == [early.id, late.id]

    def test_past_stays_not_active(self, db, hotel_data, today):
        """Stays that checked out before today are not active."""
        past_service = ReservationService(db, today=lambda: date(2025, 1, 1))
        past = past_service.book_room(101, hotel_data['anna'], '2025-02-01', '2025-02-05')

        service = ReservationService(db, today=today)
        active_ids = [r.id for r in service.list_active_reservations()]

        assert past.id not in active_ids
        assert [r.id for r in service.list_reservations_for_client(hotel_data['anna'])] == [past.id]

    def test_stay_checking_out_today_is_active(self, db, hotel_data, today):
        """Check-out equal to today still counts as active."""
        booked = ReservationService(db, today=lambda: date(2025, 4, 28)).book_room(
            101, hotel_data['anna'], '2025-04-28', TODAY
        )
        service = ReservationService(db, today=today)
        assert [r.id for r in service.list_active_reservations()] == [booked.id]

    def test_client_listing(self, lenient_service, hotel_data):
        """Only the client's own reservations are listed."""
        mine = lenient_service.book_room(101, hotel_data['anna'], '2025-06-01', '2025-06-03')
        lenient_service.book_room(102, hotel_data['jordi'], '2025-06-01', '2025-06-03')

        listed = lenient_service.list_reservations_for_client(hotel_data['anna'])

        assert [r.id for r in listed] == [mine.id]
        assert listed[0].client.full_name == 'Anna Puig'

    def test_client_listing_unknown_client(self, service):
        """Listing for an unknown client fails."""
        with pytest.raises(ClientNotFoundError):
            service.list_reservations_for_client(9999)

    def test_get_reservation_unknown(self, service):
        """Unknown reservation fails with not found."""
        with pytest.raises(ReservationNotFoundError):
            service.get_reservation(4242)


class TestCheckAvailability:
    """Tests for check_availability."""

    def test_free_room(self, service, room_101):
        """A free room reports price and nights without writing."""
        result = service.check_availability(101, '2025-06-01', '2025-06-03')

        assert result['available'] is True
        assert result['reason'] is None
        assert result['nights'] == 2
        assert result['total'] == 200.0

    def test_conflict_reported(self, lenient_service, hotel_data, db):
        """Overlapping stays are reported with their reservations."""
        booked = lenient_service.book_room(101, hotel_data['anna'], '2025-06-01', '2025-06-05')

        result = lenient_service.check_availability(101, '2025-06-03', '2025-06-07')

        assert result['available'] is False
        assert result['reason'] == 'date_range_conflict'
        assert [r.id for r in result['conflicts']] == [booked.id]
        assert count_reservations(db) == 1

    def test_gate_reported(self, service, hotel_data):
        """With the gate on, a flagged room reports room_unavailable."""
        service.book_room(101, hotel_data['anna'], '2025-06-01', '2025-06-05')

        result = service.check_availability(101, '2025-07-01', '2025-07-03')

        assert result['available'] is False
        assert result['reason'] == 'room_unavailable'

    def test_invalid_input(self, service):
        """Unknown rooms and bad ranges raise like book_room."""
        with pytest.raises(RoomNotFoundError):
            service.check_availability(999, '2025-06-01', '2025-06-03')
        with pytest.raises(InvalidDateRangeError):
            service.check_availability(101, '2025-06-03', '2025-06-01')


class TestAtomicity:
    """Tests for transactional behavior."""

    def test_failed_insert_rolls_back(self, service, hotel_data, db, monkeypatch):
        """A store failure leaves no reservation and the room flag untouched."""
        def broken_set_available(*args, **kwargs):
            raise PersistenceError('disk full')

        monkeypatch.setattr(service.rooms, 'set_available', broken_set_available)

        with pytest.raises(PersistenceError):
            service.book_room(101, hotel_data['anna'], '2025-06-01', '2025-06-04')

        assert count_reservations(db) == 0
        assert RoomRepository(db).get(101).available is True
        assert not db.in_transaction

    def test_concurrent_bookings_single_winner(self, app, hotel_data, today):
        """Two connections racing for the same stay produce one reservation."""
        db_path = app.config['DATABASE_PATH']
        barrier = threading.Barrier(2)
        results = []

        def attempt(client_id):
            conn = connect(db_path, timeout=5.0)
            try:
                service = ReservationService(conn, today=today, strict_availability=False)
                barrier.wait()
                try:
                    results.append(service.book_room(101, client_id, '2025-06-01', '2025-06-04'))
                except DateRangeConflictError as e:
                    results.append(e)
            finally:
                conn.close()

        threads = [
            threading.Thread(target=attempt, args=(hotel_data['anna'],)),
            threading.Thread(target=attempt, args=(hotel_data['jordi'],)),
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 2
        assert sum(isinstance(r, DateRangeConflictError) for r in results) == 1

        check = sqlite3.connect(db_path)
        try:
            assert check.execute('SELECT COUNT(*) FROM reserves').fetchone()[0] == 1
        finally:
            check.close()
