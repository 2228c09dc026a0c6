"""
Remove duplicate AI answers (keeps the oldest per question).
Only needed for databases populated before the one-AI-answer-per-question index existed.
Run with: python -m scripts.cleanup_duplicate_ai_answers
"""
import logging

from app.database import SessionLocal
from app.repositories.expert_answer_repository import delete_duplicate_ai_answers

logger = logging.getLogger(__name__)


def main() -> int:
    db = SessionLocal()
    try:
        deleted = delete_duplicate_ai_answers(db)
    finally:
        db.close()
    logger.info("Deleted %d duplicate AI answers", deleted)
    return deleted


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    main()
