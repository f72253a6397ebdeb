import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///gamestats.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Longest accepted game description (characters)
    MAX_DESCRIPTION_LENGTH = int(os.environ.get('MAX_DESCRIPTION_LENGTH', '5000'))
    # Threads used to fold large game histories. 0 or 1 keeps it sequential.
    STATS_WORKERS = int(os.environ.get('STATS_WORKERS', '0'))
    # Minimum number of games before the parallel fold kicks in
    STATS_PARALLEL_THRESHOLD = int(os.environ.get('STATS_PARALLEL_THRESHOLD', '500'))
