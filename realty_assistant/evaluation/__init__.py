from realty_assistant.evaluation.metrics import MetricsCalculator, TurnMetrics
from realty_assistant.evaluation.turn_log import load_turn_log, load_turn_logs

__all__ = ["MetricsCalculator", "TurnMetrics", "load_turn_log", "load_turn_logs"]
