import os

# must be set before app.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENV"] = "test"
os.environ["secret_key"] = "test-secret-key"
os.environ["algorithm"] = "HS256"
os.environ["BREVO_API_KEY"] = ""
