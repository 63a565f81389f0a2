from pathlib import Path

# Package root (holds the .env file)
BASE_PATH = Path(__file__).resolve().parent.parent
