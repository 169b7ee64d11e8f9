from dotenv import load_dotenv

from src.hr_ledger.hr_ledger.main import create_app

load_dotenv(override=False)

app = create_app()

if __name__ == "__main__":
    app.run(debug=app.config.get("DEBUG", False))
