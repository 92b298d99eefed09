"""
Unit tests for ValidationService.
"""

import pytest

from src.core.errors import ErrorCode, ValidationError
from src.services.validation_service import ValidationService


class TestValidationService:

    def setup_method(self):
        self.service = ValidationService(max_player_name_length=20)

    def test_socket_data_must_be_dict(self):
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate_socket_data(['not', 'a', 'dict'])
        assert exc_info.value.code == ErrorCode.INVALID_DATA

    def test_socket_data_required_fields(self):
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate_socket_data({'a': 1}, ['a', 'answer'])

        assert exc_info.value.code == ErrorCode.MISSING_DATA
        assert exc_info.value.details['missing_fields'] == ['answer']

    def test_socket_data_size_limit(self):
        with pytest.raises(ValidationError, match='exceeds'):
            self.service.validate_socket_data({'answer': 'x' * 20000})

    def test_socket_data_passes_through(self):
        data = {'answer': 'Paris'}
        assert self.service.validate_socket_data(data, ['answer']) is data

    def test_player_names_extracted(self):
        assert self.service.validate_player_names({'player1_name': 'Ann', 'player2_name': 'Bo'}) == ('Ann', 'Bo')

    def test_missing_names_become_empty(self):
        # Emptiness is a game rule, reported by the GameManager
        assert self.service.validate_player_names({'player1_name': None}) == ('', '')

    def test_control_characters_removed(self):
        name1, _ = self.service.validate_player_names({'player1_name': 'A\x00nn', 'player2_name': 'Bo'})
        assert name1 == 'Ann'

    def test_non_string_name_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate_player_names({'player1_name': 42, 'player2_name': 'Bo'})
        assert exc_info.value.code == ErrorCode.INVALID_DATA

    def test_long_name_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate_player_names({'player1_name': 'A' * 21, 'player2_name': 'Bo'})

        assert exc_info.value.code == ErrorCode.PLAYER_NAME_TOO_LONG
        assert exc_info.value.details['field'] == 'player1_name'

    def test_length_measured_after_trim(self):
        name1, _ = self.service.validate_player_names({'player1_name': '  ' + 'A' * 20 + '  ', 'player2_name': 'Bo'})
        assert name1.strip() == 'A' * 20

    def test_category_selection(self):
        assert self.service.validate_category_selection({'category_id': 'music'}) == ('music', None)
        assert self.service.validate_category_selection(
            {'category_id': 'music', 'category_name': 'Music'}
        ) == ('music', 'Music')

    @pytest.mark.parametrize('category_id', [None, '', 7])
    def test_category_selection_requires_id(self, category_id):
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate_category_selection({'category_id': category_id})
        assert exc_info.value.code == ErrorCode.MISSING_CATEGORY

    def test_category_name_must_be_string(self):
        with pytest.raises(ValidationError):
            self.service.validate_category_selection({'category_id': 'music', 'category_name': ['x']})

    def test_answer_returned_untouched(self):
        assert self.service.validate_answer('  Paris ') == '  Paris '

    def test_answer_required(self):
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate_answer(None)
        assert exc_info.value.code == ErrorCode.MISSING_ANSWER

    def test_answer_must_be_string(self):
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate_answer(3)
        assert exc_info.value.code == ErrorCode.INVALID_ANSWER_FORMAT

    def test_continue_choice(self):
        assert self.service.validate_continue_choice(True) is True
        assert self.service.validate_continue_choice(False) is False

        with pytest.raises(ValidationError) as exc_info:
            self.service.validate_continue_choice('yes')
        assert exc_info.value.code == ErrorCode.INVALID_CONTINUE_CHOICE

    def test_name_length_defaults_from_config(self):
        assert ValidationService().max_player_name_length > 0
