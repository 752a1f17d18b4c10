from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

import httpx

from src.adapters.http.api_client import ApiClient
from src.components.analytics import AnalyticsService
from src.components.crud import (
    CrudController,
    MemoryResourceService,
    ResourceService,
    ResourceServicePort,
)
from src.components.messaging import MessageService, UnreadPoller, UnreadSummary
from src.components.navigation import NavigationPolicy, NavigationState
from src.components.profile import ProfileEditor, ProfileService
from src.components.session import SessionProvider
from src.ports.token_store import TokenStorePort
from src.rules.models import Rules


@dataclass
class ServiceContext:
    rules: Rules
    client: ApiClient
    session: SessionProvider
    policy: NavigationPolicy
    navigation: NavigationState
    messages: MessageService
    analytics: AnalyticsService
    profiles: ProfileService
    resources: dict[str, ResourceServicePort] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        rules: Rules,
        token_store: TokenStorePort,
        transport: httpx.BaseTransport | None = None,
    ) -> ServiceContext:
        client = ApiClient(
            rules.api.base_url,
            token_store,
            timeout=rules.api.timeout_seconds,
            transport=transport,
        )
        session = SessionProvider(client, token_store)
        policy = NavigationPolicy(rules.navigation.tabs)

        resources: dict[str, ResourceServicePort] = {}
        for name, schema in rules.resources.items():
            if schema.backend == "memory":
                resources[name] = MemoryResourceService(schema)
            else:
                resources[name] = ResourceService(client, schema)

        return cls(
            rules=rules,
            client=client,
            session=session,
            policy=policy,
            navigation=NavigationState(policy),
            messages=MessageService(client),
            analytics=AnalyticsService(client),
            profiles=ProfileService(client),
            resources=resources,
        )

    def resource(self, name: str) -> ResourceServicePort:
        try:
            return self.resources[name]
        except KeyError:
            raise KeyError(f"Unknown resource: {name}") from None

    def controller(self, name: str) -> CrudController:
        user = self.session.current_user
        return CrudController(self.resource(name), role=user.role if user else None)

    def profile_editor(self) -> ProfileEditor:
        return ProfileEditor(self.profiles, self.session)

    def _fetch_unread(self) -> UnreadSummary:
        # Signed-out sessions have nothing to poll; skipping avoids a 401 per tick.
        if not self.session.is_authenticated:
            return UnreadSummary()
        return self.messages.unread()

    def unread_poller(self, on_change: Callable[[int], None]) -> UnreadPoller:
        return UnreadPoller(
            self._fetch_unread,
            interval_seconds=self.rules.polling.unread_interval_seconds,
            on_change=on_change,
        )

    def close(self) -> None:
        self.session.close()
        self.client.close()
