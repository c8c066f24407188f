from colorguesser import create_app, db

app = create_app()

if __name__ == '__main__':
    with app.app_context():
        db.create_all()
    # One request at a time: the game session has a single writer
    app.run(debug=True, threaded=False)
