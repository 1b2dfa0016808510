from decouple import Choices, config

# Server Configuration
WAVEPIPE_HOST = config('WAVEPIPE_HOST', default='localhost:8080')
WAVEPIPE_SCHEME = config('WAVEPIPE_SCHEME', default='http', cast=Choices(['http', 'https']))
API_VERSION = config('WAVEPIPE_API_VERSION', default='v0')

# Login Credentials
USERNAME = config('WAVEPIPE_USERNAME', default='test')
PASSWORD = config('WAVEPIPE_PASSWORD', default='test')
CLIENT_NAME = config('WAVEPIPE_CLIENT_NAME', default='wavepipe-client')

# Authentication
AUTH_MODE = config('WAVEPIPE_AUTH_MODE', default='hmac', cast=Choices(['token', 'hmac', 'user']))
CREDENTIAL_TRANSPORT = config('WAVEPIPE_CREDENTIAL_TRANSPORT', default='query', cast=Choices(['query', 'header']))
NONCE_LENGTH = config('WAVEPIPE_NONCE_LENGTH', default=10, cast=int)

# HTTP Configuration
REQUEST_TIMEOUT = config('WAVEPIPE_REQUEST_TIMEOUT', default=30.0, cast=float)

# Logging Configuration
LOG_LEVEL = config('WAVEPIPE_LOG_LEVEL', default='INFO')
LOG_FILE = config('WAVEPIPE_LOG_FILE', default=None)

# Test Configuration
TEST_TIMEOUT = config('TEST_TIMEOUT', default=5.0, cast=float)
