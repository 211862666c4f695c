"""
Input Validation Helpers
Provides validation and normalization of free-text league inputs
"""

import re
import logging
from datetime import date, datetime
from typing import Optional, Tuple, List, Union
from config import METHOD_ALIASES, DEFAULT_METHOD, DISPUTE_CATEGORIES, RESOLUTION_TYPES
from utils.enums import FightResult, FightMethod, DisputeCategory, ResolutionType, SenderRole

logger = logging.getLogger('TantalusBot.Validators')

MAX_REASON_LENGTH = 2000
MAX_MESSAGE_LENGTH = 2000
MAX_ROUND = 12

class Validators:
    @staticmethod
    def normalize_method(method: Optional[str]) -> FightMethod:
        """
        Normalize a free-text fight method to a canonical method

        Handles abbreviations, punctuation and common typos
        ("OK" for KO, "Decsison" for decision). Empty or unrecognized
        input defaults to a unanimous decision.

        Args:
            method: Method as typed by the fighter

        Returns:
            Canonical FightMethod
        """
        if isinstance(method, FightMethod):
            return method

        if not method or not method.strip():
            return FightMethod(DEFAULT_METHOD)

        method_upper = method.strip().upper()

        if method_upper in METHOD_ALIASES:
            return FightMethod(METHOD_ALIASES[method_upper])

        letters_only = re.sub(r'[^A-Z]', '', method_upper)
        decision_typo = any(
            fragment in letters_only for fragment in ('DECS', 'DECIS', 'DESCIS', 'DESIC')
        )

        if decision_typo or 'DECISION' in method_upper:
            if 'SPLIT' in method_upper or 'SPLT' in method_upper:
                return FightMethod.SPLIT_DECISION
            if 'MAJOR' in method_upper:
                return FightMethod.MAJORITY_DECISION
            return FightMethod.UNANIMOUS_DECISION

        if 'UNANIM' in method_upper:
            return FightMethod.UNANIMOUS_DECISION
        if 'TECHNICAL' in method_upper and ('KNOCKOUT' in method_upper or 'KO' in method_upper):
            return FightMethod.TECHNICAL_KNOCKOUT
        if 'KNOCKOUT' in method_upper or 'KNOCK-OUT' in method_upper:
            return FightMethod.KNOCKOUT
        if 'DISQUALIFICATION' in method_upper:
            return FightMethod.DISQUALIFICATION
        if 'NO CONTEST' in method_upper:
            return FightMethod.NO_CONTEST
        if 'NO DECISION' in method_upper:
            return FightMethod.NO_DECISION
        if 'SUBMISSION' in method_upper:
            return FightMethod.SUBMISSION
        if method_upper in ('O.K.', 'O.K'):
            return FightMethod.KNOCKOUT

        for known in FightMethod:
            if known.value.upper() == method_upper:
                return known

        logger.warning(f'Unrecognized fight method "{method}", defaulting to {DEFAULT_METHOD}')
        return FightMethod(DEFAULT_METHOD)

    @staticmethod
    def parse_result(result: Union[str, FightResult, None]) -> Optional[FightResult]:
        """Parse a fight result case-insensitively ('win', 'WIN', 'Win')"""
        if isinstance(result, FightResult):
            return result
        if not result:
            return None
        for known in FightResult:
            if known.value.lower() == result.strip().lower():
                return known
        return None

    @staticmethod
    def parse_category(category: Union[str, DisputeCategory, None]) -> Optional[DisputeCategory]:
        """Parse a dispute category key"""
        if isinstance(category, DisputeCategory):
            return category
        if not category:
            return None
        key = category.strip().lower().replace(' ', '_')
        return DisputeCategory(key) if key in DISPUTE_CATEGORIES else None

    @staticmethod
    def parse_resolution_type(resolution_type: Union[str, ResolutionType, None]) -> Optional[ResolutionType]:
        """Parse a resolution type key"""
        if isinstance(resolution_type, ResolutionType):
            return resolution_type
        if not resolution_type:
            return None
        key = resolution_type.strip().lower()
        return ResolutionType(key) if key in RESOLUTION_TYPES else None

    @staticmethod
    def parse_sender_role(role: Union[str, SenderRole, None]) -> Optional[SenderRole]:
        if isinstance(role, SenderRole):
            return role
        if not role:
            return None
        try:
            return SenderRole(role.strip().lower())
        except ValueError:
            return None

    @staticmethod
    def parse_date(value: Union[str, date, datetime, None]) -> Optional[date]:
        """Parse an ISO date (datetime values are truncated to their date)"""
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if not value:
            return None
        try:
            return datetime.fromisoformat(value.strip()).date()
        except ValueError:
            return None

    @staticmethod
    def validate_fight_report(opponent_name: str, result: str, fight_date,
                              fight_round: Optional[int] = None) -> Tuple[bool, str]:
        """
        Validate a self-reported fight result

        Args:
            opponent_name: Opponent display name
            result: Win, Loss or Draw
            fight_date: Date of the fight
            fight_round: Optional round the fight ended in

        Returns:
            Tuple of (is_valid, error_message)
        """
        if not opponent_name or not opponent_name.strip():
            return False, "Opponent name is required"

        if Validators.parse_result(result) is None:
            return False, "Result must be one of: Win, Loss, Draw"

        parsed_date = Validators.parse_date(fight_date)
        if parsed_date is None:
            return False, "Date is required in YYYY-MM-DD format"

        if parsed_date > date.today():
            return False, "Fight date cannot be in the future"

        if fight_round is not None:
            valid, message = Validators.validate_round(fight_round)
            if not valid:
                return False, message

        return True, ""

    @staticmethod
    def validate_round(fight_round) -> Tuple[bool, str]:
        """Validate a round number (0 is allowed for administrative records)"""
        try:
            round_number = int(fight_round)
        except (TypeError, ValueError):
            return False, "Round must be a whole number"

        if round_number < 0 or round_number > MAX_ROUND:
            return False, f"Round must be between 0 and {MAX_ROUND}"

        return True, ""

    @staticmethod
    def validate_dispute_request(reason: str, category: str,
                                 evidence_urls: Optional[List[str]] = None) -> Tuple[bool, str]:
        """
        Validate a new dispute

        Returns:
            Tuple of (is_valid, error_message)
        """
        if not reason or not reason.strip():
            return False, "A reason is required to open a dispute"

        if len(reason) > MAX_REASON_LENGTH:
            return False, f"Reason must be {MAX_REASON_LENGTH} characters or less"

        if Validators.parse_category(category) is None:
            valid_categories = ", ".join(DISPUTE_CATEGORIES.keys())
            return False, f"Invalid dispute category. Valid categories: {valid_categories}"

        for url in evidence_urls or []:
            if not Validators.is_url(url):
                return False, f"Invalid evidence URL: {url}"

        return True, ""

    @staticmethod
    def validate_resolution(resolution_type: str, resolution_text: str) -> Tuple[bool, str]:
        """Validate an admin resolution decision"""
        if Validators.parse_resolution_type(resolution_type) is None:
            valid_types = ", ".join(RESOLUTION_TYPES.keys())
            return False, f"Invalid resolution type. Valid types: {valid_types}"

        if not resolution_text or not resolution_text.strip():
            return False, "Resolution text is required"

        return True, ""

    @staticmethod
    def validate_message_body(body: str) -> Tuple[bool, str]:
        if not body or not body.strip():
            return False, "Message cannot be empty"

        if len(body) > MAX_MESSAGE_LENGTH:
            return False, f"Message must be {MAX_MESSAGE_LENGTH} characters or less"

        return True, ""

    @staticmethod
    def is_url(value: str) -> bool:
        return bool(value) and re.match(r'^https?://\S+$', value.strip()) is not None
