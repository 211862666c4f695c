"""
TantalusBot Configuration
Contains league settings, channel IDs, point rules, tier bands and dispute options
"""

import os
from datetime import datetime

# Bot Configuration
BOT_CONFIG = {
    'bot_token': os.getenv('DISCORD_BOT_TOKEN'),
}

def _env_int(name: str):
    value = os.getenv(name)
    return int(value) if value and value.isdigit() else None

# Channel IDs (announcements are skipped when a channel is not configured)
CHANNELS = {
    'tier_tracker': _env_int('LEAGUE_TIER_CHANNEL_ID'),
    'dispute_log': _env_int('LEAGUE_DISPUTE_CHANNEL_ID'),
}

# Admin user IDs granted on top of the admins table
ADMIN_USER_IDS = {
    int(admin_id) for admin_id in os.getenv('LEAGUE_ADMIN_IDS', '').split(',')
    if admin_id.strip().isdigit()
}

# Database Configuration
DATABASE_CONFIG = {
    'database_path': os.getenv('LEAGUE_DATABASE_PATH', 'database/tantalus_league.db'),
    'backup_path': 'database/backups/',
    'busy_timeout_seconds': 10.0,
}

# Point System
POINT_SYSTEM = {
    'Win': 5,
    'Loss': -3,
    'Draw': 0,
    'stoppage_bonus': 3,
}

POINTS_CONFIG = {
    'floor': None,  # e.g. 0 to stop totals going negative
}

# Stoppage methods eligible for the win bonus
STOPPAGE_METHODS = ['KO', 'TKO']

# Tier bands, ordered by min_points (max_points None = unbounded)
TIERS = [
    {
        'name': 'Amateur',
        'min_points': 0,
        'max_points': 19,
        'color': 0x9E9E9E,
        'benefits': ['Basic training access', 'Local events'],
    },
    {
        'name': 'Semi-Pro',
        'min_points': 20,
        'max_points': 39,
        'color': 0x4CAF50,
        'benefits': ['Advanced training', 'Regional events', 'Basic analytics'],
    },
    {
        'name': 'Pro',
        'min_points': 40,
        'max_points': 89,
        'color': 0x2196F3,
        'benefits': ['Professional training', 'National events', 'Full analytics',
                     'Sponsorship opportunities'],
    },
    {
        'name': 'Contender',
        'min_points': 90,
        'max_points': 149,
        'color': 0xFF9800,
        'benefits': ['Elite training', 'Championship events', 'Advanced analytics',
                     'Media coverage', 'Title shots'],
    },
    {
        'name': 'Elite',
        'min_points': 150,
        'max_points': None,
        'color': 0x9C27B0,
        'benefits': ['World-class training', 'Global events', 'Premium analytics',
                     'Live streaming', 'Media interviews', 'Championship belts'],
    },
]

# Demotion rule
DEMOTION_CONFIG = {
    'loss_window': 5,        # Most recent fights that must all be losses
    'warning_threshold': 3,  # Consecutive losses that show a demotion warning
    'exempt_tier': 'Amateur',
}

PROMOTION_REASON = 'Points threshold reached'
DEMOTION_REASON = '5 consecutive losses'

# Stats
STATS_CONFIG = {
    'recent_change_days': 30,
}

DEFAULT_METHOD = 'UD'

# Free-text method variations (upper-cased key) mapped to canonical methods
METHOD_ALIASES = {
    'KO': 'KO',
    'OK': 'KO',  # Common typo
    'K.O.': 'KO',
    'K.O': 'KO',
    'KNOCKOUT': 'KO',
    'KNOCK OUT': 'KO',
    'KNOCK-OUT': 'KO',
    'TKO': 'TKO',
    'TK': 'TKO',
    'T.K.O.': 'TKO',
    'T.K.O': 'TKO',
    'TECHNICAL KO': 'TKO',
    'TECHNICAL KNOCKOUT': 'TKO',
    'TECHNICAL KNOCK OUT': 'TKO',
    'TECHNICAL KNOCK-OUT': 'TKO',
    'UD': 'UD',
    'UNANIMOUS': 'UD',
    'UNANIMOUS DECISION': 'UD',
    'DECISION': 'UD',
    'SD': 'SD',
    'SPLIT': 'SD',
    'SPLIT DECISION': 'SD',
    'MD': 'MD',
    'MAJORITY': 'MD',
    'MAJORITY DECISION': 'MD',
    'SUBMISSION': 'Submission',
    'SUB': 'Submission',
    'DQ': 'DQ',
    'DISQUALIFICATION': 'DQ',
    'NC': 'No Contest',
    'NO CONTEST': 'No Contest',
    'ND': 'No Decision',
    'NO DECISION': 'No Decision',
}

# Disputes
DISPUTE_CATEGORIES = {
    'cheating': 'Cheating',
    'spamming': 'Spamming',
    'exploits': 'Exploits',
    'excessive_punches': 'Excessive Punches',
    'stamina_draining': 'Stamina Draining',
    'power_punches': 'Power Punches',
    'other': 'Other',
}

RESOLUTION_TYPES = {
    'warning': {
        'display_name': 'Warning',
        'requires_opponent': False,
    },
    'give_win_to_submitter': {
        'display_name': 'Win Awarded to Submitter',
        'requires_opponent': True,
    },
    'one_week_suspension': {
        'display_name': 'One Week Suspension',
        'requires_opponent': True,
        'suspension_days': 7,
    },
    'two_week_suspension': {
        'display_name': 'Two Week Suspension',
        'requires_opponent': True,
        'suspension_days': 14,
    },
    'one_month_suspension': {
        'display_name': 'One Month Suspension',
        'requires_opponent': True,
        'suspension_days': 30,
    },
    'banned_from_league': {
        'display_name': 'Banned From League',
        'requires_opponent': True,
        'permanent_ban': True,
    },
    'dispute_invalid': {
        'display_name': 'Dispute Invalid',
        'requires_opponent': False,
    },
    'other': {
        'display_name': 'Other',
        'requires_opponent': False,
    },
}

# banned_until value meaning "never lifted"
PERMANENT_BAN_UNTIL = datetime(9999, 12, 31, 23, 59, 59)

AWARDED_WIN_METHOD = 'UD'
AWARDED_FIGHT_ROUND = 0
AWARDED_WIN_NOTE = 'Dispute resolution: Admin awarded win to submitter'
AWARDED_LOSS_NOTE = 'Dispute resolution: Admin awarded win to opponent'
DEFAULT_WEIGHT_CLASS = 'Unknown'

# Embed Colors
EMBED_COLORS = {
    'success': 0x00ff00,
    'error': 0xff0000,
    'warning': 0xffff00,
    'info': 0x0099ff,
    'neutral': 0x808080,
    'promotion': 0x00FF7F,
    'demotion': 0xFF6B00,
    'dispute': 0xFFD700,
    'suspension': 0xff0000,
}

TIER_COLORS = {tier['name']: tier['color'] for tier in TIERS}

def get_tier_color(tier: str) -> int:
    """Get the color associated with a tier"""
    return TIER_COLORS.get(tier, EMBED_COLORS['neutral'])

def get_suspension_days(resolution_type: str):
    """Get suspension length in days for a resolution type, or None"""
    return RESOLUTION_TYPES.get(resolution_type, {}).get('suspension_days')

def requires_opponent(resolution_type: str) -> bool:
    """Check if a resolution type acts on the opponent"""
    return RESOLUTION_TYPES.get(resolution_type, {}).get('requires_opponent', False)
