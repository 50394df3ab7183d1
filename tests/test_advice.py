from conftest import fake_openai
from greensteps.ai_router import SYSTEM_PROMPT, AdviceGenerator, build_user_prompt
from greensteps.schemas import QuizAnswers
from greensteps.suggestions import local_tips, rank_tips


def _remote(make_settings, **client_kwargs):
    client, calls = fake_openai(**client_kwargs)
    gen = AdviceGenerator(make_settings(openai_api_key="sk-test"), client=client)
    return gen, calls


# ---- remote mode -----------------------------------------------------------
def test_remote_returns_completion_verbatim(make_settings, quiz):
    gen, calls = _remote(make_settings, content="Here are some tips:\n• Use public transport")
    out = gen.generate(quiz, "San Francisco, CA, US", 5000)
    assert out == "Here are some tips:\n• Use public transport"
    req = calls[0]
    assert req["model"] == "gpt-4o-mini"
    assert req["temperature"] == 0.7
    assert req["messages"][0] == {"role": "system", "content": SYSTEM_PROMPT}
    assert req["messages"][1]["role"] == "user"
    assert "Location: San Francisco, CA, US" in req["messages"][1]["content"]


def test_model_override(make_settings, quiz):
    client, calls = fake_openai(content="Custom model tips")
    AdviceGenerator(make_settings(openai_api_key="sk-test", openai_model="gpt-4"), client=client).generate(quiz)
    assert calls[0]["model"] == "gpt-4"


def test_prompt_contains_every_answer(quiz):
    prompt = build_user_prompt(quiz, "San Francisco, CA, US", 5000)
    assert "Estimated Annual Footprint: 5000 kg CO2e" in prompt
    assert "Diet: omnivore" in prompt
    assert "Transport mode: mixed; weekly miles: 50" in prompt
    assert "Electricity: 400 kWh/month; Heating: electric" in prompt
    assert "Flights (short-haul/yr): 2" in prompt
    assert "Recycling: often" in prompt


def test_prompt_placeholders(quiz):
    prompt = build_user_prompt(quiz)
    assert "Location: Unknown" in prompt
    assert "Estimated Annual Footprint: N/A" in prompt


def test_remote_error_falls_back_to_local(make_settings, quiz):
    gen, _ = _remote(make_settings, error=RuntimeError("API Error"))
    assert gen.generate(quiz, "Paris, FR", 5000) == local_tips(quiz, "Paris, FR", 5000)


def test_empty_text_falls_back_to_local(make_settings, quiz):
    for kwargs in ({"content": ""}, {"content": "   "}, {"content": None}, {"choices": []}):
        gen, _ = _remote(make_settings, **kwargs)
        assert gen.generate(quiz) == local_tips(quiz)


def test_local_only_flag_skips_remote(make_settings, quiz):
    client, calls = fake_openai(content="remote")
    gen = AdviceGenerator(make_settings(openai_api_key="sk-test", local_advice_only=True), client=client)
    assert gen.generate(quiz) == local_tips(quiz)
    assert calls == []


def test_no_credential_means_local(settings, quiz):
    gen = AdviceGenerator(settings)
    assert gen.remote is False
    assert gen.generate(quiz).startswith("Location: Unknown")


# ---- local mode ------------------------------------------------------------
def test_local_ranking_keeps_top_three(quiz):
    ranked = rank_tips(quiz)
    impacts = [kg for kg, _ in ranked]
    # transport 1050, diet 800, electricity 288, heating 400, flights 400, recycling 30
    assert impacts == [1050, 800, 400]
    assert "heat pump" in ranked[2][1]


def test_transport_impact_caps_at_fifty_miles(quiz):
    heavy = quiz.model_copy(update={"weekly_miles_driven": 300})
    assert rank_tips(heavy)[0][0] == round(50 * 52 * 0.404)


def test_local_render_format(quiz):
    text = local_tips(quiz, "Austin, TX, US", 5000)
    lines = text.splitlines()
    assert lines[0] == "Location: Austin, TX, US · Estimated footprint: 5000 kg CO2e/yr"
    assert len(lines) == 4
    assert all(line.startswith("• ") for line in lines[1:])


def test_conditions_filter_tips():
    q = QuizAnswers(
        diet="vegan",
        weekly_miles_driven=0,
        electricity_kwh_per_month=100,
        home_heating="other",
        flights_short_haul_per_year=0,
        recycling_habit="always",
        transport_mode="bike_walk",
    )
    ranked = rank_tips(q)
    assert len(ranked) == 1
    assert "LEDs" in ranked[0][1]


def test_nothing_to_suggest_congratulates():
    q = QuizAnswers(
        diet="vegan",
        weekly_miles_driven=0,
        electricity_kwh_per_month=0,
        home_heating="other",
        flights_short_haul_per_year=0,
        recycling_habit="always",
        transport_mode="bike_walk",
    )
    lines = local_tips(q).splitlines()
    assert lines[0] == "Location: Unknown · Estimated footprint: N/A"
    assert lines[1].startswith("• Nice")
