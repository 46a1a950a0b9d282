from main import RUNS


def _run(client, **body):
    resp = client.post("/api/run", json=body)
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()


# ---------------------------------------------------------------------------
# Pages & metadata
# ---------------------------------------------------------------------------
def test_index_renders(client):
    resp = client.get("/")
    assert resp.status_code == 200
    html = resp.get_data(as_text=True)
    assert "Algorithm Animator" in html
    assert 'id="delay-slider"' in html
    assert 'value="astar" selected' in html


def test_algorithms_endpoint_lists_the_registry(client):
    data = client.get("/api/algorithms").get_json()
    assert len(data) == 13
    assert data[0]["key"] == "astar"
    assert data[0]["params"][0]["name"] == "heuristic"


def test_state_starts_from_the_configured_defaults(client):
    state = client.get("/api/state").get_json()
    assert state["selected_algo"] == "astar"
    assert state["grid"]["size"] == 20
    assert state["grid"]["start"] == [2, 2]
    assert state["grid"]["end"] == [17, 17]
    assert state["run"] is None


# ---------------------------------------------------------------------------
# Grid editing
# ---------------------------------------------------------------------------
def test_grid_config_resizes_and_moves_markers(client):
    data = client.post("/api/grid/config", json={"size": 6, "start": [0, 0], "end": [5, 5]}).get_json()
    assert data["grid"] == {"size": 6, "start": [0, 0], "end": [5, 5], "walls": []}
    assert data["svg"].count('class="cell ') == 36


def test_grid_config_replaces_walls(client):
    body = {"size": 5, "start": [0, 0], "end": [4, 4], "walls": [[1, 1], [2, 2]]}
    data = client.post("/api/grid/config", json=body).get_json()
    assert data["grid"]["walls"] == [[1, 1], [2, 2]]


def test_grid_config_generates_a_seeded_maze(client):
    body = {"size": 10, "maze": 0.3, "seed": 4}
    first = client.post("/api/grid/config", json=body).get_json()
    second = client.post("/api/grid/config", json=body).get_json()
    assert first["grid"]["walls"]
    assert first["grid"] == second["grid"]


def test_grid_config_rejects_bad_input(client):
    for body in (
        {"size": 1},
        {"size": 500},
        {"size": "big"},
        {"start": [40, 40]},
        {"walls": [[2, 2]], "start": [2, 2]},
        {"maze": "lots"},
    ):
        resp = client.post("/api/grid/config", json=body)
        assert resp.status_code == 400, body
        assert "error" in resp.get_json()


def test_non_object_body_is_rejected(client):
    resp = client.post("/api/grid/config", json=[1, 2])
    assert resp.status_code == 400


def test_toggle_and_clear_walls(client):
    client.post("/api/grid/config", json={"size": 5, "start": [0, 0], "end": [4, 4]})

    data = client.post("/api/grid/toggle_wall", json={"x": 1, "y": 2}).get_json()
    assert data["toggled"] is True
    assert data["grid"]["walls"] == [[1, 2]]

    data = client.post("/api/grid/toggle_wall", json={"cell": [0, 0]}).get_json()
    assert data["toggled"] is False

    data = client.post("/api/grid/clear_walls").get_json()
    assert data["grid"]["walls"] == []


# ---------------------------------------------------------------------------
# Runs & stepping
# ---------------------------------------------------------------------------
def test_run_astar_then_step_through(client):
    client.post("/api/grid/config", json={"size": 5, "start": [0, 0], "end": [4, 4]})
    data = _run(client, algo_key="astar")

    assert data["current_step"] == 0
    assert data["metrics"]["status"] == "found"
    assert data["metrics"]["path_length"] == 9
    assert data["run_id"] in RUNS
    total = data["total_steps"]
    assert total == data["metrics"]["total_steps"]

    assert client.post("/api/step/prev").status_code == 400

    step = client.post("/api/step/next").get_json()
    assert step["current_step"] == 1
    assert "<svg" in step["svg"]
    assert 'class="code-line highlight"' in step["pseudocode"]

    step = client.post("/api/step/prev").get_json()
    assert step["current_step"] == 0

    step = client.post("/api/step/goto", json={"index": "end"}).get_json()
    assert step["current_step"] == total - 1
    assert step["is_final"]
    assert client.post("/api/step/next").status_code == 400

    assert client.post("/api/step/goto", json={"index": total}).status_code == 400
    assert client.post("/api/step/goto", json={"index": "middle"}).status_code == 400


def test_new_run_replaces_the_previous_one(client):
    first = _run(client, algo_key="bubble_sort", params={"array_size": 5, "seed": 1})
    second = _run(client, algo_key="quick_sort", params={"array_size": 5, "seed": 1})

    assert first["run_id"] not in RUNS
    assert second["run_id"] in RUNS
    state = client.get("/api/state").get_json()
    assert state["selected_algo"] == "quick_sort"
    assert state["run"]["algo_key"] == "quick_sort"
    assert state["params"]["quick_sort"]["array_size"] == 5


def test_every_family_runs_through_the_api(client):
    for key, params in (
        ("linear_search", {"array_size": 8, "seed": 2}),
        ("simulated_annealing", {"max_iterations": 20, "seed": 2}),
        ("particle_swarm", {"iterations": 5, "seed": 2}),
        ("kmeans", {"k": 2, "num_points": 20, "seed": 2}),
    ):
        data = _run(client, algo_key=key, params=params)
        assert data["total_steps"] > 1
        final = client.post("/api/step/goto", json={"index": "end"}).get_json()
        assert final["is_final"]
        assert "<svg" in final["svg"]


def test_run_rejects_bad_requests(client):
    assert client.post("/api/run", json={"algo_key": "bogosort"}).status_code == 400
    resp = client.post("/api/run", json={"algo_key": "bubble_sort", "params": {"array_size": 999}})
    assert resp.status_code == 400
    resp = client.post("/api/run", json={"algo_key": "kmeans", "params": {"colour": "red"}})
    assert resp.status_code == 400


def test_stepping_without_a_run_is_an_error(client):
    resp = client.post("/api/step/next")
    assert resp.status_code == 400
    assert "run an algorithm first" in resp.get_json()["error"]


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------
def test_play_toggles(client):
    assert client.post("/api/step/play").get_json()["is_playing"] is True
    assert client.post("/api/step/play").get_json()["is_playing"] is False


def test_speed_presets_and_custom_delay(client):
    assert client.post("/api/config/speed", json={"speed": "slow"}).get_json() == {
        "speed": "slow", "delay_ms": 500,
    }
    assert client.post("/api/config/speed", json={"delay_ms": 0}).get_json() == {
        "speed": "custom", "delay_ms": 0,
    }
    assert client.post("/api/config/speed", json={"delay_ms": -10}).status_code == 400
    assert client.post("/api/config/speed", json={"speed": "warp"}).status_code == 400
    assert client.get("/api/state").get_json()["delay_ms"] == 0


def test_select_algorithm(client):
    data = client.post("/api/config/algo", json={"algo_key": "kmeans"}).get_json()
    assert data["algo_key"] == "kmeans"
    assert 'data-param="k"' in data["params"]
    assert client.post("/api/config/algo", json={"algo_key": "nope"}).status_code == 400


def test_learning_mode_hides_explanations(client):
    assert client.post("/api/config/mode", json={"learning_mode": False}).get_json() == {
        "learning_mode": False,
    }
    data = _run(client, algo_key="bubble_sort", params={"array_size": 4, "seed": 1})
    assert "Learning mode disabled" in data["explanation"]


def test_learning_mode_accepts_form_strings(client):
    for raw, expected in (("false", False), ("On", True), ("0", False), (True, True)):
        resp = client.post("/api/config/mode", json={"learning_mode": raw})
        assert resp.get_json() == {"learning_mode": expected}, raw


def test_learning_mode_rejects_non_booleans(client):
    for raw in ("maybe", 3, None, [True]):
        resp = client.post("/api/config/mode", json={"learning_mode": raw})
        assert resp.status_code == 400, raw
    assert client.get("/api/state").get_json()["learning_mode"] is True


# ---------------------------------------------------------------------------
# Run store
# ---------------------------------------------------------------------------
def test_run_store_keeps_the_most_recent_sessions(app):
    app.config["ANIMATOR_MAX_RUNS"] = 3
    clients = [app.test_client() for _ in range(5)]
    run_ids = [
        _run(c, algo_key="bubble_sort", params={"array_size": 4, "seed": 1})["run_id"]
        for c in clients
    ]

    assert list(RUNS) == run_ids[2:]
    resp = clients[0].post("/api/step/next")
    assert resp.status_code == 400
    assert clients[4].post("/api/step/next").get_json()["current_step"] == 1


def test_stepping_refreshes_a_run_in_the_store(app):
    app.config["ANIMATOR_MAX_RUNS"] = 2
    first, second, third = (app.test_client() for _ in range(3))
    kept = _run(first, algo_key="bubble_sort", params={"array_size": 4, "seed": 1})["run_id"]
    dropped = _run(second, algo_key="bubble_sort", params={"array_size": 4, "seed": 1})["run_id"]
    first.post("/api/step/next")
    _run(third, algo_key="bubble_sort", params={"array_size": 4, "seed": 1})

    assert kept in RUNS
    assert dropped not in RUNS


# ---------------------------------------------------------------------------
# Client playback
# ---------------------------------------------------------------------------
def test_play_loop_drops_responses_from_a_stopped_loop(client):
    html = client.get("/").get_data(as_text=True)
    stop = html[html.index("function stopPlaying()"):html.index("async function playLoop()")]
    loop = html[html.index("async function playLoop()"):html.index("document.addEventListener('click'")]

    assert "generation += 1;" in stop
    assert loop.index("const gen = generation;") < loop.index("await post('/api/step/next')")
    assert loop.index("if (gen !== generation) return;") < loop.index("applyStep(data)")
