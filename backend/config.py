import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Comma separated list, or '*' for any origin
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3000'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    # Quiz shape
    QUESTION_COUNT = int(os.environ.get('QUESTION_COUNT', '10'))
    QUESTION_TIME_LIMIT_SEC = int(os.environ.get('QUESTION_TIME_LIMIT_SEC', '60'))
    # Auto-advance delays after feedback (milliseconds)
    CORRECT_ADVANCE_DELAY_MS = int(os.environ.get('CORRECT_ADVANCE_DELAY_MS', '1000'))
    INCORRECT_ADVANCE_DELAY_MS = int(os.environ.get('INCORRECT_ADVANCE_DELAY_MS', '2000'))
    TIMEOUT_ADVANCE_DELAY_MS = int(os.environ.get('TIMEOUT_ADVANCE_DELAY_MS', '2000'))
    FAULT_ADVANCE_DELAY_MS = int(os.environ.get('FAULT_ADVANCE_DELAY_MS', '3000'))
    # Size of the winners banner
    WINNER_COUNT = int(os.environ.get('WINNER_COUNT', '3'))
