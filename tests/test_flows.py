"""Tests for the discovery steps and the conversation engine."""

import pytest
from api.flows.definitions import (
    get_lead_steps,
    parse_budget,
    parse_contact_email,
    parse_notes,
    parse_pain_points,
    parse_timeline,
)
from api.flows.engine import (
    ACKNOWLEDGEMENT,
    CLOSING_PROMPT,
    COMPLETION_FOLLOW_UP,
    GREETING,
    GREETING_SUGGESTIONS,
    ConversationEngine,
    ConversationStatus,
    MessageType,
    Sender,
    render_summary,
)
from api.flows.lead_sink import LeadSink
from lead_scoring.lead_profile import LeadProfile
from lead_scoring.scoring_model import ScoreLabel, Urgency


def _comparable(state):
    """State without the random message ids."""
    return (
        state.step_index,
        state.status,
        state.lead,
        [(m.sender, m.content, m.suggestions, m.message_type) for m in state.messages],
    )


def _step_index(step_id):
    return [s.id for s in get_lead_steps()].index(step_id)


def _advance_to(engine, answers, step_id):
    for answer in answers[:_step_index(step_id)]:
        engine.submit(answer)
    assert engine.active_step.id == step_id


# ── Step Definitions ──────────────────────────────────

class TestStepDefinitions:
    def test_step_ids_unique(self):
        ids = [step.id for step in get_lead_steps()]
        assert len(ids) == len(set(ids)) == 11

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_blank_input_always_retries(self, text):
        for step in get_lead_steps():
            result = step.parse(text, LeadProfile())
            assert not result.success, step.id
            assert result.retry_message
            assert result.updates == {}

    def test_every_suggestion_is_accepted(self):
        for step in get_lead_steps():
            for suggestion in step.suggestions:
                assert step.parse(suggestion, LeadProfile()).success, (step.id, suggestion)

    def test_unparsed_budget_keeps_label(self):
        result = parse_budget("Not sure yet", LeadProfile())
        assert result.success
        assert result.updates == {"budget_range": "Not sure yet"}
        assert result.follow_up

    def test_budget_range_resolves_upper_bound(self):
        result = parse_budget("$10k-$50k", LeadProfile())
        assert result.updates == {"budget_range": "$10k-$50k", "budget_value": 50_000}

    def test_timeline_whenever(self):
        result = parse_timeline("whenever", LeadProfile())
        assert result.success
        assert result.updates == {"timeline": "whenever"}

    def test_timeline_asap(self):
        result = parse_timeline("ASAP", LeadProfile())
        assert result.updates == {"timeline": "ASAP", "timeline_weeks": 2}
        assert result.follow_up

    def test_timeline_negated_urgency(self):
        result = parse_timeline("Not urgent, probably next year", LeadProfile())
        assert result.updates["timeline_weeks"] == 52
        assert result.follow_up is None
        assert parse_timeline("not immediately", LeadProfile()).updates == {"timeline": "not immediately"}

    def test_email_skip(self):
        result = parse_contact_email("Skip for now", LeadProfile())
        assert result.success
        assert result.updates == {}

    def test_email_invalid(self):
        result = parse_contact_email("jane at acme", LeadProfile())
        assert not result.success

    def test_email_normalized(self):
        result = parse_contact_email("  Jane@Acme.IO ", LeadProfile())
        assert result.updates == {"contact_email": "jane@acme.io"}

    def test_notes_nothing(self):
        assert parse_notes("Nothing else.", LeadProfile()).updates == {}
        assert parse_notes("Call after 5pm", LeadProfile()).updates == {"notes": "Call after 5pm"}

    def test_pain_follow_up_by_theme(self):
        manual = parse_pain_points("Too much copy-paste between tools", LeadProfile())
        other = parse_pain_points("Nobody agrees on priorities", LeadProfile())
        assert manual.follow_up != other.follow_up
        assert other.follow_up


# ── Conversation Engine ───────────────────────────────

class TestConversationEngine:
    def test_initial_state(self, engine):
        state = engine.state
        assert state.step_index == 0
        assert state.status == ConversationStatus.COLLECTING
        assert state.lead.is_empty
        assert len(state.messages) == 2
        greeting, question = state.messages
        assert greeting.content == GREETING
        assert list(greeting.suggestions) == GREETING_SUGGESTIONS
        assert question.content == get_lead_steps()[0].question
        assert question.message_type == MessageType.QUESTION

    def test_init_matches_construction(self, engine):
        assert _comparable(engine.init()) == _comparable(ConversationEngine().state)

    def test_company_name_advances(self, engine):
        state = engine.submit("Acme Robotics")
        assert state.step_index == 1
        assert state.lead.company_name == "Acme Robotics"

    def test_later_questions_carry_helper(self, engine):
        state = engine.submit("Acme Robotics")
        step = get_lead_steps()[1]
        assert state.messages[-1].content == f"{step.question}\n{step.helper}"
        assert list(state.messages[-1].suggestions) == step.suggestions

    def test_invalid_answer_retries(self, engine):
        before = engine.state
        state = engine.submit("   ")
        assert state.step_index == 0
        assert state.lead == before.lead
        user, retry, question = state.messages[-3:]
        assert user.sender == Sender.USER
        assert user.content == ""
        assert retry.message_type == MessageType.INFO
        assert question.content == before.messages[-1].content

    def test_repeated_failures_leave_record_unchanged(self, engine, valid_answers):
        _advance_to(engine, valid_answers, "contact_email")
        lead = engine.state.lead
        for bad in ["nope", "still@wrong", ""]:
            state = engine.submit(bad)
            assert state.lead == lead
            assert engine.active_step.id == "contact_email"
        state = engine.submit("jane@acme.io")
        assert state.lead.contact_email == "jane@acme.io"
        assert engine.active_step.id == "notes"

    def test_completes_after_exactly_n_answers(self, engine, sink, valid_answers):
        for answer in valid_answers[:-1]:
            state = engine.submit(answer)
            assert state.status == ConversationStatus.COLLECTING
        state = engine.submit(valid_answers[-1])
        assert state.status == ConversationStatus.COMPLETE
        assert state.step_index == len(valid_answers)
        assert engine.active_step is None
        assert len(sink.saved) == 1

    def test_completion_messages(self, engine, valid_answers):
        for answer in valid_answers:
            state = engine.submit(answer)
        follow_up, summary, closing = state.messages[-3:]
        assert follow_up.content == COMPLETION_FOLLOW_UP
        assert summary.message_type == MessageType.SUMMARY
        assert summary.content == render_summary(state.lead)
        assert closing.content == CLOSING_PROMPT

    def test_final_record_and_insights(self, engine, sink, valid_answers):
        for answer in valid_answers:
            state = engine.submit(answer)
        lead = state.lead
        assert lead.company_name == "Acme Robotics"
        assert lead.company_size == "51-200"
        assert lead.budget_value == 150_000
        assert lead.timeline_weeks == 4
        assert lead.notes is None

        insights = engine.insights
        assert insights.score == 97
        assert insights.score_label == ScoreLabel.PRIORITY
        assert insights.urgency == Urgency.URGENT
        assert insights.playbook_key == "fast_track"
        assert sink.saved == [(lead, 97)]

    def test_message_count(self, engine, valid_answers):
        for answer in valid_answers:
            state = engine.submit(answer)
        # opening pair + 11 answers + 4 follow-ups + 10 questions + 3 closing messages
        assert len(state.messages) == 30

    def test_submit_after_complete_acknowledges(self, engine, sink, valid_answers):
        for answer in valid_answers:
            done = engine.submit(answer)
        insights = engine.insights
        state = engine.submit("One more thing: we use Slack")
        assert state.lead == done.lead
        assert state.step_index == done.step_index
        assert state.messages[-2].sender == Sender.USER
        assert state.messages[-1].content == ACKNOWLEDGEMENT
        assert engine.insights is insights
        assert len(sink.saved) == 1

    def test_failing_sink_does_not_break_completion(self, failing_sink, valid_answers):
        engine = ConversationEngine(lead_sink=failing_sink)
        for answer in valid_answers:
            state = engine.submit(answer)
        assert failing_sink.calls == 1
        assert state.status == ConversationStatus.COMPLETE
        assert state.messages[-1].content == CLOSING_PROMPT

    def test_no_sink(self, valid_answers):
        engine = ConversationEngine()
        for answer in valid_answers:
            state = engine.submit(answer)
        assert state.is_complete

    def test_sink_protocol(self, sink, failing_sink):
        assert isinstance(sink, LeadSink)
        assert isinstance(failing_sink, LeadSink)

    @pytest.mark.parametrize("answers_given", [0, 3, 11])
    def test_reset_equals_init(self, engine, valid_answers, answers_given):
        for answer in valid_answers[:answers_given]:
            engine.submit(answer)
        assert _comparable(engine.reset()) == _comparable(ConversationEngine().init())
        assert engine.insights.score == 0

    def test_timeline_whenever_is_not_retried(self, engine, valid_answers):
        _advance_to(engine, valid_answers, "timeline")
        state = engine.submit("whenever")
        assert engine.active_step.id == "tech_stack"
        assert state.lead.timeline == "whenever"
        assert state.lead.timeline_weeks is None

    def test_timeline_asap_is_urgent(self, engine, valid_answers):
        _advance_to(engine, valid_answers, "timeline")
        state = engine.submit("asap")
        assert state.lead.timeline_weeks == 2
        assert engine.insights.urgency == Urgency.URGENT
        assert engine.insights.score_breakdown["timeline"] == 20

    def test_insights_track_answers(self, engine):
        assert engine.insights.score == 0
        engine.submit("Acme Robotics")
        engine.submit("SaaS")
        assert engine.insights.score_breakdown == {"completeness": 5}

    def test_current_suggestions(self, engine):
        assert engine.current_suggestions() == []
        state = engine.submit("Acme Robotics")
        assert engine.current_suggestions(state) == get_lead_steps()[1].suggestions

    def test_current_suggestions_after_retry(self, engine):
        engine.submit("Acme Robotics")
        state = engine.submit("")
        # retry message carries no suggestions, the re-asked question does
        assert engine.current_suggestions(state) == get_lead_steps()[1].suggestions

    def test_state_is_a_snapshot(self, engine):
        state = engine.state
        state.messages.clear()
        state.step_index = 7
        assert len(engine.state.messages) == 2
        assert engine.state.step_index == 0

    def test_snapshot_messages_are_immutable(self, engine):
        state = engine.submit("Acme Robotics")
        with pytest.raises(AttributeError):
            state.messages[-1].suggestions.append("Injected")
        assert engine.current_suggestions() == get_lead_steps()[1].suggestions

    def test_unknown_action(self, engine):
        with pytest.raises(TypeError):
            engine.dispatch("submit")

    def test_empty_steps(self):
        with pytest.raises(ValueError):
            ConversationEngine(steps=[])

    def test_custom_steps(self):
        steps = get_lead_steps()[:1]
        engine = ConversationEngine(steps=steps)
        state = engine.submit("Acme Robotics")
        assert state.is_complete
        assert state.messages[-2].content == "Quick recap:\n• Acme Robotics"

    def test_state_to_dict(self, engine):
        data = engine.submit("Acme Robotics").to_dict()
        assert data["status"] == "collecting"
        assert data["lead"] == {"company_name": "Acme Robotics"}
        assert data["messages"][0]["type"] == "info"
        assert data["messages"][2]["sender"] == "user"


# ── Summary Rendering ─────────────────────────────────

class TestRenderSummary:
    def test_full_summary(self, full_profile):
        assert render_summary(full_profile) == "\n".join([
            "Quick recap:",
            "• Acme Robotics in SaaS",
            "• Goal: Generate more qualified leads",
            "• Challenge: Manual data entry",
            "• Budget comfort zone: $150k+",
            "• Timeline: ASAP",
            "• Contact: Jane Doe (jane@acme.io)",
        ])

    def test_absent_fields_omitted(self):
        summary = render_summary(LeadProfile(industry="Healthcare", contact_name="Sam"))
        assert summary == "Quick recap:\n• Industry: Healthcare\n• Contact: Sam"

    def test_empty_record(self):
        assert render_summary(LeadProfile()) == "Quick recap:"

    def test_budget_value_without_label(self):
        summary = render_summary(LeadProfile(budget_value=75_000, contact_email="sam@x.io"))
        assert "• Budget comfort zone: ~$75,000" in summary
        assert summary.endswith("• Contact: sam@x.io")
