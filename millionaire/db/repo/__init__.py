from millionaire.db.repo.game_questions_repo import GameQuestionsRepo
from millionaire.db.repo.games_repo import GamesRepo
from millionaire.db.repo.ledger_repo import LedgerRepo
from millionaire.db.repo.questions_repo import QuestionsRepo
from millionaire.db.repo.users_repo import UsersRepo

__all__ = [
    "GameQuestionsRepo",
    "GamesRepo",
    "LedgerRepo",
    "QuestionsRepo",
    "UsersRepo",
]
