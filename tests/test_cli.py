def test_init_and_seed_commands(app):
    runner = app.test_cli_runner()

    init = runner.invoke(args=["init-db"])
    assert init.exit_code == 0
    assert "Tables created" in init.output

    seeded = runner.invoke(args=["seed-db"])
    assert seeded.exit_code == 0
    assert "Seeded 5 books and 5 borrowers" in seeded.output

    again = runner.invoke(args=["seed-db"])
    assert "Seeded 0 books and 0 borrowers" in again.output
