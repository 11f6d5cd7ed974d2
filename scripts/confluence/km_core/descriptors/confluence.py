"""Confluence service descriptor."""

from __future__ import annotations

from km_core.collectors.links import LinkFetcher
from km_core.descriptors.base import ServiceDescriptor
from km_core.formatting import encode_uri_component, escape, full_name, initials, tooltip_text
from km_core.models import Configuration, Subscription
from km_core.refresh import RefreshController
from km_core.view import GlobalHost, ViewContext

KEY = "service:km:confluence"
PARAMETER_URL = KEY + ":url"
PARAMETER_SPACE = KEY + ":space"
PARAMETER_HELP = "service:km:help"
SELECT_ENDPOINT = "service/km/confluence/"
PANEL_ID = "confluence-links"
NAV_ICON = (
    '<img class="nav-icon visible-retracted" src="main/plugin/km/confluence/img/confluence.png" '
    'alt="confluence" title="" data-toggle="tooltip" data-container="body" '
    'data-original-title="Confluence">'
)


class ConfluenceDescriptor(ServiceDescriptor):
    node_id = KEY

    def __init__(self, host: GlobalHost | None = None, controller: RefreshController | None = None) -> None:
        self.host = host if host is not None else GlobalHost()
        self.controller = controller or RefreshController(LinkFetcher(), PARAMETER_URL)

    def configure_subscription_parameters(self, configuration: Configuration) -> None:
        super().register_typed_select(configuration, PARAMETER_SPACE, SELECT_ENDPOINT)

    def render_key(self, subscription: Subscription, parameter: str | None = None) -> str:
        return super().render_key(subscription, parameter or PARAMETER_SPACE)

    def render_details_key(self, subscription: Subscription) -> str:
        space = (subscription.data or {}).get("space") or {}
        return super().generate_carousel(
            subscription,
            [
                (PARAMETER_SPACE, self.render_key(subscription)),
                ("name", escape(space.get("name")) or None),
            ],
        )

    def render_features(self, subscription: Subscription) -> str:
        parameters = subscription.parameters
        home = parameters.get(PARAMETER_URL, "") + "/display/" + encode_uri_component(parameters.get(PARAMETER_SPACE))
        result = super().render_service_link("home", home, PARAMETER_SPACE, attributes=' target="_blank"')
        result += super().render_service_help_link(parameters, PARAMETER_HELP)
        return result

    def render_details_features(self, subscription: Subscription) -> str:
        space = (subscription.data or {}).get("space") or {}
        activity = space.get("activity")
        if not activity:
            return ""

        author = activity.get("author") or {}
        # The tooltip renders as HTML: every part is escaped before joining.
        tooltip = tooltip_text(escape(activity.get("page")), escape(full_name(author)), escape(activity.get("moment")))
        avatar = activity.get("authorAvatar")
        if avatar:
            badge = f'<img class="rounded-circle avatar" src="{escape(avatar)}" alt="{escape(initials(author))}">'
        else:
            badge = f'<span class="avatar avatar-initials">{escape(initials(author))}</span>'

        href = activity.get("pageUrl")
        target = f' href="{escape(href)}" target="_blank"' if href else ""
        return f'<a class="feature"{target} data-toggle="tooltip" data-html="true" title="{escape(tooltip)}">{badge}</a>'

    async def render_global(self, view: ViewContext, configuration: Configuration) -> None:
        view.reset()
        view.configuration = configuration
        self.host.mount(PANEL_ID, NAV_ICON, view)
        view.prepend_icon(super().to_icon(KEY, "x64"))
        view.login_href = configuration.node.parameters.get(PARAMETER_URL)

        async def on_refresh() -> None:
            await self.refresh_links(view, configuration)

        view.on_refresh(on_refresh)
        await self.refresh_links(view, configuration)

    async def refresh_links(self, view: ViewContext, configuration: Configuration) -> None:
        await self.controller.refresh(view, configuration)
