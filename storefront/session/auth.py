"""
Adaptateur Supabase Auth pour le moniteur de session.
supabase-py (client sync) est bloquant: sign_out est exécuté dans le threadpool
pour ne pas geler la boucle d'événements.
"""
from typing import Optional
from starlette.concurrency import run_in_threadpool
from supabase import Client

import storefront.infra.supabase_client as supabase_client


class SupabaseAuthSession:
    def __init__(self, client: Optional[Client] = None):
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = supabase_client.get_supabase()
        return self._client

    async def sign_out(self) -> None:
        await run_in_threadpool(self.client.auth.sign_out)

    def get_current_user_token(self) -> Optional[str]:
        session = self.client.auth.get_session()
        return getattr(session, "access_token", None) if session else None
