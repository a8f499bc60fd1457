"""Research-paper token registry with citation fees and DAO governance, held in memory."""

__version__ = "0.1.0"