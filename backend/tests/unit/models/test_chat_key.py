"""
Unit Tests for chat keys
"""
from uuid import uuid4

from app.models.chat import make_chat_key, split_chat_key


class TestChatKey:

    def test_symmetric(self):
        a, b = str(uuid4()), str(uuid4())

        assert make_chat_key(a, b) == make_chat_key(b, a)

    def test_sorted_ids_joined(self):
        assert make_chat_key("bbb", "aaa") == "aaa_bbb"

    def test_round_trip_participants(self):
        a, b = str(uuid4()), str(uuid4())

        assert set(split_chat_key(make_chat_key(a, b))) == {a, b}

    def test_split_ignores_empty_parts(self):
        assert split_chat_key("_abc_") == ("abc",)
