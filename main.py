# Entrypoint for the TalentBridge backend.
from talentbridge import create_app

app = create_app()


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(app.config.get('PORT', 8000)), debug=app.debug, use_reloader=False)
