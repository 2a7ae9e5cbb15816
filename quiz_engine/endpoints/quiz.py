# Endpoints for generating quizzes (plain and streamed) and grading submissions
# quiz_engine/endpoints/quiz.py
import asyncio
from typing import Optional, Set

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from quiz_engine.models.quiz import QuizData, QuizRequest, QuizResponse, QuizSubmission, SubmissionResponse
from quiz_engine.services.quality import find_quality_issues, quality_score
from quiz_engine.services.quiz_service import QuizService, get_quiz_service
from quiz_engine.services.scoring import score_submission
from quiz_engine.services.stream_publisher import StreamPublisher, run_with_publisher
from quiz_engine.utils.exceptions import InvalidRequest
from quiz_engine.utils.logger import logger

router = APIRouter()

# Streaming runs outlive their response if the client disconnects.
_background_runs: Set[asyncio.Task] = set()


@router.get("/health")
async def health():
    return {"status": "OK", "message": "Quiz API is running"}


@router.post("/generate-quiz", response_model=QuizResponse)
async def generate_quiz(body: QuizRequest, service: QuizService = Depends(get_quiz_service)):
    request = service.build_request(body.topic, body.difficulty, body.question_count, body.language)
    logger.info(
        f"Generating {request.total_count} questions about '{request.topic}' "
        f"at {request.difficulty.value} level ({request.language.value})..."
    )

    questions = await service.generate_questions(request)

    issues = find_quality_issues(questions)
    if issues:
        logger.warning(f"Quality issues detected: {issues}")
    logger.info(f"Successfully generated {len(questions)} questions")

    return QuizResponse(data=QuizData(
        topic=body.topic,
        difficulty=request.difficulty.value,
        question_count=len(questions),
        questions=questions,
        quality_score=quality_score(issues),
    ))


@router.get("/generate-quiz/stream")
async def stream_quiz(
    topic: Optional[str] = None,
    difficulty: Optional[str] = None,
    questionCount: Optional[str] = "50",
    language: Optional[str] = "english",
    batchSize: Optional[str] = None,
    parallel: Optional[str] = None,
    service: QuizService = Depends(get_quiz_service),
):
    publisher = StreamPublisher()
    try:
        request = service.build_request(topic, difficulty, questionCount, language, batchSize, parallel)
    except InvalidRequest as e:
        logger.warning(f"Rejected streaming request: {e}")
        publisher.fail(str(e))
    else:
        task = asyncio.create_task(run_with_publisher(service, request, publisher))
        _background_runs.add(task)
        task.add_done_callback(_background_runs.discard)

    return StreamingResponse(
        publisher.events(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@router.post("/submit-quiz", response_model=SubmissionResponse)
async def submit_quiz(submission: QuizSubmission):
    data = score_submission(submission.questions, submission.user_answers,
                            topic=submission.topic, difficulty=submission.difficulty)
    logger.info(f"Graded quiz submission: {data.correct_answers}/{data.total_questions} correct")
    return SubmissionResponse(data=data)
