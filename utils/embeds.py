"""
Discord Embed Templates
Provides consistent embed formatting for league announcements
"""

import discord
from datetime import datetime
from typing import Dict, Any
from config import EMBED_COLORS, DISPUTE_CATEGORIES, RESOLUTION_TYPES, get_tier_color
from utils.enums import TierTransition

class EmbedTemplates:
    @staticmethod
    def create_base_embed(title: str, description: str = "", color: int = EMBED_COLORS['info']) -> discord.Embed:
        """Create a base embed with common formatting"""
        embed = discord.Embed(
            title=title,
            description=description,
            color=color,
            timestamp=datetime.now()
        )
        embed.set_footer(text="Tantalus Boxing Club • League Office")
        return embed

    @staticmethod
    def tier_change_embed(event) -> discord.Embed:
        """Create a tier promotion/demotion announcement"""
        promoted = event.transition == TierTransition.PROMOTION.value

        embed = EmbedTemplates.create_base_embed(
            title="📈 Tier Promotion" if promoted else "📉 Tier Demotion",
            description=f"**{event.fighter_name}** moves to **{event.to_tier}**",
            color=get_tier_color(event.to_tier) if promoted else EMBED_COLORS['demotion']
        )

        embed.add_field(name="Previous Tier", value=event.from_tier, inline=True)
        embed.add_field(name="New Tier", value=f"**{event.to_tier}**", inline=True)
        embed.add_field(name="Points", value=str(event.points), inline=True)
        embed.add_field(name="Reason", value=event.reason, inline=False)
        return embed

    @staticmethod
    def dispute_opened_embed(event) -> discord.Embed:
        embed = EmbedTemplates.create_base_embed(
            title=f"⚖️ Dispute #{event.dispute_id} Opened",
            description=event.reason[:1024],
            color=EMBED_COLORS['dispute']
        )

        embed.add_field(name="Category", value=DISPUTE_CATEGORIES.get(event.category, event.category), inline=True)
        embed.add_field(name="Filed By", value=f"<@{event.disputer_id}>", inline=True)
        embed.add_field(
            name="Opponent",
            value=f"<@{event.opponent_id}>" if event.opponent_id else "Unresolved",
            inline=True
        )
        return embed

    @staticmethod
    def dispute_resolved_embed(event) -> discord.Embed:
        resolution_info: Dict[str, Any] = RESOLUTION_TYPES.get(event.resolution_type, {})

        embed = EmbedTemplates.create_base_embed(
            title=f"✅ Dispute #{event.dispute_id} Resolved",
            description=event.resolution[:1024],
            color=EMBED_COLORS['success']
        )

        embed.add_field(
            name="Decision",
            value=resolution_info.get('display_name', event.resolution_type),
            inline=True
        )
        embed.add_field(name="Resolved By", value=f"<@{event.resolved_by}>", inline=True)
        embed.add_field(
            name="Resolved At",
            value=f"<t:{int(datetime.now().timestamp())}:F>",
            inline=True
        )
        return embed

    @staticmethod
    def suspension_embed(event) -> discord.Embed:
        if event.permanent:
            description = f"<@{event.fighter_id}> has been **banned from the league**"
        else:
            description = (
                f"<@{event.fighter_id}> is suspended until "
                f"<t:{int(event.banned_until.timestamp())}:F>"
            )

        embed = EmbedTemplates.create_base_embed(
            title="⛔ League Suspension",
            description=description,
            color=EMBED_COLORS['suspension']
        )
        embed.add_field(name="Reason", value=event.reason, inline=False)
        embed.add_field(name="Dispute", value=f"#{event.dispute_id}", inline=True)
        return embed

    @staticmethod
    def tier_sweep_embed(summary: Dict[str, int]) -> discord.Embed:
        """Summary of a full tier sweep"""
        embed = EmbedTemplates.create_base_embed(
            title="🔄 Tier Review Complete",
            color=EMBED_COLORS['info'] if not summary.get('errors') else EMBED_COLORS['warning']
        )
        embed.add_field(name="Fighters Checked", value=str(summary.get('processed', 0)), inline=True)
        embed.add_field(name="Promotions", value=str(summary.get('promotions', 0)), inline=True)
        embed.add_field(name="Demotions", value=str(summary.get('demotions', 0)), inline=True)

        if summary.get('errors'):
            embed.add_field(name="Errors", value=str(summary['errors']), inline=True)

        return embed
