"""
Notification System
Delivers committed league events as in-app notifications and Discord announcements
"""

import discord
import logging
from typing import Optional, Iterable, List, Dict, Any
from database.models import Database
from config import CHANNELS, DEMOTION_REASON, RESOLUTION_TYPES
from utils.embeds import EmbedTemplates
from utils.enums import TierTransition
from systems.events import TierChangeEvent, DisputeOpenedEvent, DisputeResolvedEvent, SuspensionEvent

logger = logging.getLogger('TantalusBot.Notifications')

class NotificationSystem:
    def __init__(self, database: Database, bot: Optional[discord.Client] = None):
        self.db = database
        self.bot = bot

    async def publish(self, events: Iterable[object]) -> int:
        """
        Deliver events after their transaction has committed

        Delivery is best-effort: a failing event is logged and the rest
        are still delivered. Committed league state is never affected.

        Returns:
            Number of events delivered without error
        """
        delivered = 0
        for event in events:
            try:
                await self._deliver(event)
                delivered += 1
            except Exception as e:
                logger.warning(f'Failed to deliver {type(event).__name__}: {e}')
        return delivered

    async def _deliver(self, event: object):
        if isinstance(event, TierChangeEvent):
            await self._on_tier_change(event)
        elif isinstance(event, DisputeOpenedEvent):
            await self._on_dispute_opened(event)
        elif isinstance(event, DisputeResolvedEvent):
            await self._on_dispute_resolved(event)
        elif isinstance(event, SuspensionEvent):
            await self._on_suspension(event)
        else:
            logger.warning(f'No handler for event type {type(event).__name__}')

    async def _on_tier_change(self, event: TierChangeEvent):
        if event.transition == TierTransition.PROMOTION.value:
            title = 'Tier Promotion!'
            message = f"Congratulations! You've been promoted to {event.to_tier} tier!"
        else:
            title = 'Tier Demotion'
            reason = (event.reason or DEMOTION_REASON).lower()
            message = f"You've been demoted to {event.to_tier} tier due to {reason}."

        await self.db.create_notification(event.fighter_id, 'tier_change', title, message)
        await self.announce('tier_tracker', EmbedTemplates.tier_change_embed(event))
        logger.info(f'Tier change notification sent for fighter {event.fighter_id}: {event.from_tier} -> {event.to_tier}')

    async def _on_dispute_opened(self, event: DisputeOpenedEvent):
        if event.opponent_id:
            await self.db.create_notification(
                event.opponent_id, 'dispute',
                'Dispute Filed',
                f'A dispute (#{event.dispute_id}) has been filed regarding one of your fights.'
            )
        await self.announce('dispute_log', EmbedTemplates.dispute_opened_embed(event))

    async def _on_dispute_resolved(self, event: DisputeResolvedEvent):
        display_name = RESOLUTION_TYPES.get(event.resolution_type, {}).get('display_name', event.resolution_type)

        disputer_message = event.message_to_disputer or f'Your dispute #{event.dispute_id} was resolved: {display_name}.'
        await self.db.create_notification(event.disputer_id, 'dispute', 'Dispute Resolved', disputer_message)

        if event.opponent_id:
            opponent_message = event.message_to_opponent or f'Dispute #{event.dispute_id} involving you was resolved: {display_name}.'
            await self.db.create_notification(event.opponent_id, 'dispute', 'Dispute Resolved', opponent_message)

        await self.announce('dispute_log', EmbedTemplates.dispute_resolved_embed(event))

    async def _on_suspension(self, event: SuspensionEvent):
        if event.permanent:
            message = f'You have been banned from the league. Reason: {event.reason}'
        else:
            message = (f"You have been suspended until {event.banned_until.strftime('%Y-%m-%d %H:%M')}. "
                       f'Reason: {event.reason}')

        await self.db.create_notification(event.fighter_id, 'suspension', 'League Suspension', message)
        await self.announce('dispute_log', EmbedTemplates.suspension_embed(event))

    async def announce(self, channel_key: str, embed: discord.Embed) -> bool:
        """Send an embed to a configured channel if the bot is connected"""
        if self.bot is None:
            return False

        channel_id = CHANNELS.get(channel_key)
        if not channel_id:
            return False

        channel = self.bot.get_channel(channel_id)
        if not channel:
            logger.warning(f'{channel_key} channel not found')
            return False

        try:
            await channel.send(embed=embed)
            return True
        except discord.HTTPException as e:
            logger.warning(f'Failed to send to {channel_key} channel: {e}')
            return False

    async def get_notifications(self, user_id: int, unread_only: bool = False) -> List[Dict[str, Any]]:
        return await self.db.get_notifications(user_id, unread_only=unread_only)

    async def mark_all_read(self, user_id: int) -> int:
        return await self.db.mark_notifications_read(user_id)
