"""Tests for the channel transport."""

import pytest

from familiar.models.events import MessageAppended, StatusChanged
from familiar.transport import ChannelTransport


class TestChannelTransport:
    """Tests for input queueing and event fan-out."""

    @pytest.mark.asyncio
    async def test_events_without_subscribers_are_dropped(self):
        """Test that events are not buffered for subscribers that join later."""
        transport = ChannelTransport()

        await transport.emit(StatusChanged(label="Online", is_busy=False))
        events = transport.subscribe()

        assert events.empty()

    @pytest.mark.asyncio
    async def test_events_fan_out_to_every_subscriber(self):
        transport = ChannelTransport()
        first = transport.subscribe()
        second = transport.subscribe()
        event = MessageAppended(role="assistant", content="hi")

        await transport.emit(event)

        assert first.get_nowait() == event
        assert second.get_nowait() == event

    @pytest.mark.asyncio
    async def test_subscription_ends_with_block(self):
        """Test that leaving a subscription block stops delivery to its queue."""
        transport = ChannelTransport()

        with transport.subscription() as events:
            assert transport.subscriber_count == 1

        await transport.emit(StatusChanged(label="Online", is_busy=False))

        assert transport.subscriber_count == 0
        assert events.empty()

    @pytest.mark.asyncio
    async def test_send_reports_queue_position(self):
        transport = ChannelTransport()

        assert await transport.send("one") == 1
        assert await transport.send("two") == 2
        assert transport.inputs.get_nowait() == "one"
