from huntclient.main import app

app()
