"""
Unit tests for the ErrorResponseFactory module and the with_error_handling decorator.
"""

from unittest.mock import patch

from src.core.errors import ErrorCode, InvalidStateTransition, ValidationError
from src.error_handler import with_error_handling
from src.services.error_response_factory import ErrorResponseFactory


class TestErrorResponseFactory:

    def setup_method(self):
        self.factory = ErrorResponseFactory()

    def test_create_success_response(self):
        data = {'phase': 'category'}
        assert self.factory.create_success_response(data) == {'success': True, 'data': data}

    def test_create_error_response(self):
        response = self.factory.create_error_response(
            ErrorCode.DUPLICATE_PLAYER_NAME,
            'Players must have different names!',
            {'reason': 'duplicate'}
        )

        assert response == {
            'success': False,
            'error': {
                'code': 'DUPLICATE_PLAYER_NAME',
                'message': 'Players must have different names!',
                'details': {'reason': 'duplicate'}
            }
        }

    def test_create_error_response_without_details(self):
        response = self.factory.create_error_response(ErrorCode.INTERNAL_ERROR, 'Internal error')
        assert response['error']['details'] == {}

    @patch('src.services.error_response_factory.emit')
    def test_emit_error(self, mock_emit):
        self.factory.emit_error(ErrorCode.WRONG_PHASE, 'Not now')

        mock_emit.assert_called_once_with('error', {
            'success': False,
            'error': {'code': 'WRONG_PHASE', 'message': 'Not now', 'details': {}}
        })

    @patch('src.services.error_response_factory.emit')
    def test_emit_validation_error(self, mock_emit):
        error = ValidationError(ErrorCode.UNKNOWN_CATEGORY, 'Unknown category', {'category_id': 'x'})

        self.factory.emit_validation_error(error)

        payload = mock_emit.call_args[0][1]
        assert payload['error']['code'] == 'UNKNOWN_CATEGORY'
        assert payload['error']['details'] == {'category_id': 'x'}

    def test_handle_validation_exception(self):
        error = InvalidStateTransition('Cannot do that', ErrorCode.WRONG_PHASE)
        assert self.factory.handle_exception(error) == (ErrorCode.WRONG_PHASE, 'Cannot do that')

    def test_handle_unexpected_exception(self):
        code, message = self.factory.handle_exception(KeyError('x'), 'test')
        assert code == ErrorCode.INTERNAL_ERROR
        assert message == 'An internal error occurred'


class TestWithErrorHandling:

    @patch('src.services.error_response_factory.emit')
    def test_passes_through_return_value(self, mock_emit):
        @with_error_handling
        def handler(data):
            return data['x']

        assert handler({'x': 1}) == 1
        mock_emit.assert_not_called()

    @patch('src.services.error_response_factory.emit')
    def test_validation_error_is_emitted(self, mock_emit):
        @with_error_handling
        def handler(data):
            raise ValidationError(ErrorCode.MISSING_ANSWER, 'Answer is required')

        assert handler({}) is None
        assert mock_emit.call_args[0][1]['error']['code'] == 'MISSING_ANSWER'

    @patch('src.services.error_response_factory.emit')
    def test_unexpected_error_becomes_internal_error(self, mock_emit):
        @with_error_handling
        def handler(data):
            raise RuntimeError('kaboom')

        handler({})

        payload = mock_emit.call_args[0][1]
        assert payload['error']['code'] == 'INTERNAL_ERROR'
        assert 'kaboom' not in payload['error']['message']

    def test_preserves_metadata(self):
        @with_error_handling
        def handle_start_game(data):
            """Docstring."""

        assert handle_start_game.__name__ == 'handle_start_game'
        assert handle_start_game.__doc__ == 'Docstring.'
