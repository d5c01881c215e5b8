from roast_bot.agents.roaster import FALLBACK_COMMENT, RoastAgent, run_review_safely

__all__ = ["FALLBACK_COMMENT", "RoastAgent", "run_review_safely"]
