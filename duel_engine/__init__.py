"""
The duel_engine package contains the core systems of Duel Chess:
board model, move generation, dice combat, exact win probabilities
and the game state machine.
"""

from .game_logic import (DuelChess, GamePhase, GameState, PendingCombat, TeamSlot, create_game,
                         create_piece, make_move, resolve_pending_combat, setup_board)
from .board import Board
from .piece_profile import Piece, PieceClass, Position, stats_with_evolution, upgrade_die
from .moves import (Move, all_legal_moves, apply_move, find_king, is_checkmate, is_in_check,
                    is_square_attacked, is_stalemate, legal_moves, parse_move, pseudo_legal_moves)
from .combat import (CombatLogEntry, CombatResult, CombatantInfo, apply_victory, calculate_damage,
                     resolve_combat)
from .balance import (CombatConfig, calculate_win_probability, class_vs_class_winrate,
                      class_vs_class_winrate_asym, custom_winrate, evaluate_balance_targets,
                      winrate_matrix)
from .species import Classification, Species, SpeciesCatalogue
from .type_chart import matchup_score, type_effectiveness, type_multiplier
from .errors import DuelChessError, InvalidMove, NoPendingCombat, UnknownSpecies
