import os

from paygate import create_app

app = create_app()

if __name__ == "__main__":
    app.run(debug=False, port=int(os.getenv("PORT", "8000")))
