"""
Unit tests for the per-question answer editors.
"""

from learniverse.quiz.editors import (
    HiddenWordEditor,
    MatchingEditor,
    UnscrambleEditor,
    WordSequenceEditor,
    create_workspace,
)
from learniverse.quiz.models import Question


def sequence_question() -> Question:
    return Question.from_dict(
        {
            "id": 22,
            "type": "word-sequence",
            "text": "Arrange the words:",
            "options": ["clock", "As", "struck", "the"],
            "answer": ["As", "the", "clock", "struck"],
        }
    )


class TestCreateWorkspace:
    def test_single_value_types_have_no_editor(self, mc_questions):
        assert create_workspace(mc_questions[0]) is None

    def test_editor_per_type(self, sample_matching_question, sample_hidden_word_question):
        assert isinstance(create_workspace(sample_matching_question), MatchingEditor)
        assert isinstance(create_workspace(sample_hidden_word_question), HiddenWordEditor)
        assert isinstance(create_workspace(sequence_question()), WordSequenceEditor)


class TestMatchingEditor:
    def test_shuffle_is_deterministic(self, sample_matching_question):
        first = MatchingEditor(sample_matching_question, seed=7)
        second = MatchingEditor(sample_matching_question, seed=7)
        assert first.definitions == second.definitions

    def test_initial_order_does_not_give_answer_away(self, sample_matching_question):
        editor = MatchingEditor(sample_matching_question)
        canonical = [item.definition for item in sample_matching_question.items]
        assert editor.definitions != canonical
        assert sorted(editor.definitions) == sorted(canonical)

    def test_assign_swaps_and_writes_mapping(self, sample_matching_question):
        written = []
        editor = MatchingEditor(sample_matching_question, write=written.append)
        target = editor.definitions.index("Durable for stop signs")
        editor.assign(0, target)

        assert editor.mapping()["Metal"] == "Durable for stop signs"
        assert written[-1] == editor.mapping()

    def test_move_reorders(self, sample_matching_question):
        editor = MatchingEditor(sample_matching_question)
        last = editor.definitions[-1]
        editor.move(len(editor.definitions) - 1, 0)
        assert editor.definitions[0] == last

    def test_out_of_range_moves_ignored(self, sample_matching_question):
        written = []
        editor = MatchingEditor(sample_matching_question, write=written.append)
        before = list(editor.definitions)
        editor.move(0, 10)
        editor.assign(-1, 0)
        assert editor.definitions == before
        assert written == []

    def test_restore_from_mapping(self, sample_matching_question):
        saved = {item.term: item.definition for item in sample_matching_question.items}
        editor = MatchingEditor(sample_matching_question, initial=saved)
        assert editor.mapping() == saved

    def test_pairs_from_answer_strings(self):
        question = Question.from_dict(
            {
                "id": 5,
                "type": "matching",
                "text": "Match:",
                "answer": ["triangle=roof", "octagon=stop sign"],
            }
        )
        editor = MatchingEditor(question)
        assert editor.terms == ["triangle", "octagon"]
        assert sorted(editor.definitions) == ["roof", "stop sign"]


class TestWordSequenceEditor:
    def test_arrange_permutation(self):
        written = []
        editor = WordSequenceEditor(sequence_question(), write=written.append)
        current = editor.order
        target = ["As", "the", "clock", "struck"]
        assert editor.arrange([current.index(word) for word in target]) is True
        assert editor.order == target
        assert written[-1] == target

    def test_arrange_rejects_non_permutation(self):
        editor = WordSequenceEditor(sequence_question())
        before = editor.order
        assert editor.arrange([0, 0, 1, 2]) is False
        assert editor.order == before

    def test_initial_order_is_not_the_answer(self):
        editor = WordSequenceEditor(sequence_question())
        assert editor.order != ["As", "the", "clock", "struck"]

    def test_restores_saved_order(self):
        saved = ["the", "As", "struck", "clock"]
        editor = WordSequenceEditor(sequence_question(), initial=saved)
        assert editor.order == saved

    def test_mixed_type_saved_order_ignored(self):
        editor = WordSequenceEditor(sequence_question(), initial=["the", 3, None, "clock"])
        assert sorted(editor.order) == ["As", "clock", "struck", "the"]


class TestUnscrambleEditor:
    def test_tiles_from_letters(self):
        question = Question.from_dict(
            {
                "id": 3,
                "type": "unscramble",
                "text": "Unscramble:",
                "letters": "GONACOT GLITRANE",
                "answer": ["OCTAGON", "TRIANGLE"],
            }
        )
        written = []
        editor = UnscrambleEditor(question, write=written.append)
        assert editor.tiles == ["GONACOT", "GLITRANE"]

        editor.set_word(1, " triangle ")
        assert editor.entries == ["", "triangle"]
        assert written[-1] == ["", "triangle"]

    def test_unscrambled_tile_gets_shuffled(self):
        question = Question.from_dict(
            {"id": 8, "type": "unscramble", "text": "?", "letters": "WIND", "answer": ["WIND"]}
        )
        editor = UnscrambleEditor(question)
        assert editor.tiles[0] != "WIND"
        assert sorted(editor.tiles[0]) == sorted("WIND")


class TestHiddenWordEditor:
    def test_found_word_written_with_cells(self, sample_hidden_word_question):
        written = []
        editor = HiddenWordEditor(sample_hidden_word_question, write=written.append)
        editor.select((0, 0), (0, 2))

        assert written[-1] == {"found": {"CAT": [[0, 0], [0, 1], [0, 2]]}}
        assert editor.last_found.word == "CAT"

    def test_restores_previous_finds(self, sample_hidden_word_question):
        saved = {"found": {"SUN": [[3, 0], [3, 1], [3, 2]]}}
        editor = HiddenWordEditor(sample_hidden_word_question, initial=saved)
        assert editor.is_claimed((3, 1))
        assert "SUN" not in editor.remaining_words
