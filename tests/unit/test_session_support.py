from unittest.mock import MagicMock

import pytest

from storefront.session import EventTarget, InteractionKind, SupabaseAuthSession


def test_event_target_registers_listener_once():
    target = EventTarget()
    calls = []
    listener = lambda: calls.append(1)

    target.add_event_listener(InteractionKind.SCROLL, listener)
    target.add_event_listener("scroll", listener)
    assert target.listener_count("scroll") == 1

    assert target.dispatch_event(InteractionKind.SCROLL) == 1
    target.remove_event_listener(InteractionKind.SCROLL, listener)
    target.remove_event_listener(InteractionKind.SCROLL, listener)
    assert target.dispatch_event("scroll") == 0
    assert calls == [1]


@pytest.mark.asyncio
async def test_supabase_auth_session_signs_out():
    client = MagicMock()
    auth = SupabaseAuthSession(client)
    await auth.sign_out()
    client.auth.sign_out.assert_called_once_with()


def test_supabase_auth_session_current_token(mock_db_dependency):
    mock_db_dependency.auth.get_session.return_value = MagicMock(access_token="jwt-1")
    assert SupabaseAuthSession().get_current_user_token() == "jwt-1"

    mock_db_dependency.auth.get_session.return_value = None
    assert SupabaseAuthSession().get_current_user_token() is None
