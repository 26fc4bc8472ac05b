"""Web page fetch tool."""

import re
from typing import Literal

import httpx
from pydantic import BaseModel, Field

from familiar.tools.base import ToolDefinition

_TITLE_RE = re.compile(r"<title[^>]*>(.*?)</title>", re.IGNORECASE | re.DOTALL)


class BrowserInput(BaseModel):
    """Input schema for the browser tool."""

    action: Literal["navigate"]
    url: str = Field(..., pattern=r"^https?://", description="URL to navigate to")


def extract_title(html: str) -> str:
    """Return the collapsed text of the first <title> element, or an empty string."""
    match = _TITLE_RE.search(html)
    if not match:
        return ""
    return " ".join(match.group(1).split())


def create_browser_tool(timeout: float = 20.0, transport: httpx.AsyncBaseTransport | None = None) -> ToolDefinition:
    async def browser_handler(params: BrowserInput) -> str:
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True, transport=transport) as client:
            response = await client.get(params.url)
            response.raise_for_status()

        content = response.text
        return f"Title: {extract_title(content)}\nContent Length: {len(content)} chars"

    return ToolDefinition(
        name="browser_automation",
        description="Fetch a web page. Actions: 'navigate'. Returns the page title and content length.",
        input_schema_class=BrowserInput,
        handler=browser_handler,
    )
