"""
Game systems package.
"""
from .economy import ResourceLedger
from .buildings import BuildingRegistry
from .tide import TideCycle
from .rates import RateCalculator, compute_rate, format_rate
from .raid import RaidSession, raid_reward
from .clock import GameClock
