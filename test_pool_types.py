import pytest

from pool_types import Session, is_valid_session, is_valid_time


def test_sessions_compare_by_value():
    a = Session("Balboa Pool", 0, "09:00", "11:00", "Family Swim")
    b = Session.from_dict({"pool": "Balboa Pool", "day": 0, "startTime": "09:00",
                           "endTime": "11:00", "sessionType": "Family Swim"})
    assert a == b
    assert a != Session("Balboa Pool", 0, "09:00", "11:30", "Family Swim")
    assert a in [Session("Rossi Pool", 0, "09:00", "11:00"), b]


def test_session_is_not_hashable():
    session = Session("Balboa Pool", 0, "09:00", "11:00")
    with pytest.raises(TypeError):
        hash(session)
    with pytest.raises(TypeError):
        {session}


@pytest.mark.parametrize("value,expected", [
    ("00:00", True),
    ("09:30", True),
    ("23:59", True),
    ("24:00", False),
    ("29:00", False),
    ("9:30", False),
    ("09:60", False),
    (930, False),
    (None, False),
])
def test_is_valid_time(value, expected):
    assert is_valid_time(value) == expected


@pytest.mark.parametrize("session", [
    Session("Balboa Pool", 7, "09:00", "10:00"),
    Session("Balboa Pool", -1, "09:00", "10:00"),
    Session("Balboa Pool", True, "09:00", "10:00"),
    Session("Balboa Pool", "0", "09:00", "10:00"),
    Session("Balboa Pool", 0, "10:00", "10:00"),
    Session("Balboa Pool", 0, "11:00", "10:00"),
    Session("Balboa Pool", 0, "23:00", "24:00"),
    Session("Balboa Pool", 0, "9:00", "10:00"),
])
def test_malformed_sessions(session):
    assert not is_valid_session(session)


def test_valid_session():
    assert is_valid_session(Session("Balboa Pool", 6, "23:00", "23:59"))
