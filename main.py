#!/usr/bin/env python3
"""
TantalusBot - Tantalus Boxing Club League Office
Main entry point and bot initialization
"""
from dotenv import load_dotenv
load_dotenv()
import asyncio
import discord
import logging

from config import BOT_CONFIG
from database.models import Database
from systems.league_engine import LeagueEngine
from utils.embeds import EmbedTemplates

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler('tantalusbot.log'),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger('TantalusBot')

class LeagueBot(discord.Client):
    def __init__(self):
        intents = discord.Intents.default()
        intents.members = True

        super().__init__(intents=intents)

        # Initialize systems
        self.db = Database()
        self.engine = LeagueEngine(self.db, bot=self)
        self._startup_done = False

    async def on_ready(self):
        """Called when the bot is ready and connected to Discord"""
        logger.info(f'{self.user} has connected to Discord!')

        # on_ready fires again after reconnects
        if self._startup_done:
            return
        self._startup_done = True

        await self.db.initialize()
        logger.info('Database initialized')

        logger.info('Running startup tier review...')
        summary = await self.engine.process_all_tier_changes()
        if summary['promotions'] or summary['demotions'] or summary['errors']:
            await self.engine.notifications.announce('tier_tracker', EmbedTemplates.tier_sweep_embed(summary))

        await self.change_presence(
            activity=discord.Activity(type=discord.ActivityType.watching, name="the league standings")
        )

async def run_maintenance():
    """Database setup, backup and tier review without connecting to Discord"""
    db = Database()
    await db.initialize()
    await db.backup_database()

    engine = LeagueEngine(db)
    summary = await engine.process_all_tier_changes()
    logger.info(f"Maintenance complete: {summary['processed']} fighters checked, "
                f"{summary['promotions']} promotions, {summary['demotions']} demotions, "
                f"{summary['errors']} errors")
    return summary

async def main():
    """Main function to start the bot"""
    if not BOT_CONFIG['bot_token']:
        logger.warning('DISCORD_BOT_TOKEN not set, running offline maintenance only')
        await run_maintenance()
        return

    bot = LeagueBot()

    try:
        logger.info('Starting TantalusBot...')
        await bot.start(BOT_CONFIG['bot_token'])

    except discord.LoginFailure:
        logger.error('Invalid bot token')
    except KeyboardInterrupt:
        logger.info('Bot shutdown requested')
    except Exception as e:
        logger.error(f'Unexpected error: {e}', exc_info=True)
    finally:
        if not bot.is_closed():
            await bot.close()
        logger.info('TantalusBot shutdown complete')

if __name__ == '__main__':
    asyncio.run(main())
