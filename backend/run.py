from gamestats import create_app

# Entry point for the Flask CLI: `flask --app run db upgrade`, `flask --app run player-stats`
app = create_app()
