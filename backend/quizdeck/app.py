# backend/quizdeck/app.py

import os, logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.middleware.base import BaseHTTPMiddleware
from dotenv import load_dotenv

from quizdeck.core import (
    MissingAnswer,
    NetworkFailure,
    NotFound,
    QuizError,
    ResultSlot,
    assemble,
    coerce_draft,
    decode_question,
    encode_question_form,
    encode_quiz_form,
    initial_drafts,
    reconcile,
)
from quizdeck.core.form_codec import default_form
from quizdeck.core.result_slot import DEFAULT_MAXSIZE, DEFAULT_TTL
from quizdeck.core.schemas import (
    AttemptRequest,
    AttemptSubmittedResponse,
    QuestionForm,
    QuestionType,
    QuizDetailResponse,
    QuizForm,
    ResultResponse,
)
from quizdeck.core.store_client import configure_store, reset_store

# ------------------------------------------------------------
# Setup
# ------------------------------------------------------------
load_dotenv()
logging.basicConfig(level=os.getenv("QUIZDECK_LOG_LEVEL", "INFO").upper())
logger = logging.getLogger("quizdeck")


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await reset_store()


app = FastAPI(title="Quizdeck API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.getenv("QUIZDECK_CORS_ORIGINS", "*").split(",")],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Middleware to log requests
class LogRequestMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        try:
            body = await request.body()
            logger.info(
                f"Incoming {request.method} {request.url.path} body={body.decode('utf-8')}"
            )
        except Exception:
            logger.warning("Could not read request body")
        return await call_next(request)

app.add_middleware(LogRequestMiddleware)

# Submitted results waiting to be displayed once:
# { result_id: AttemptResult }, expired when never read
RESULT_SLOT = ResultSlot(
    ttl=float(os.getenv("QUIZDECK_RESULT_TTL", DEFAULT_TTL)),
    maxsize=int(os.getenv("QUIZDECK_RESULT_MAXSIZE", DEFAULT_MAXSIZE)),
)

# ------------------------------------------------------------
# Exception handlers
# ------------------------------------------------------------
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.error(f"Validation error: {exc.errors()} body={exc.body}")
    return JSONResponse(
        status_code=422,
        content={
            "status": "error",
            "detail": exc.errors(),
            "body": exc.body,
        },
    )

@app.exception_handler(QuizError)
async def quiz_error_handler(request: Request, exc: QuizError):
    if isinstance(exc, NotFound):
        status_code = 404
    elif isinstance(exc, NetworkFailure):
        status_code = 502
    else:
        status_code = 422
    content = {"status": "error", "kind": exc.kind, "message": exc.message}
    if isinstance(exc, MissingAnswer):
        content["question_id"] = exc.question_id
    logger.warning(f"{exc.kind} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=status_code, content=content)

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"status": "error", "message": str(exc)},
    )

# ------------------------------------------------------------
# Taking routes
# ------------------------------------------------------------
@app.get("/quizzes")
async def list_quizzes():
    quizzes = await configure_store().list_quizzes()
    return {"status": "ok", "quizzes": quizzes}

@app.get("/quizzes/{quiz_id}", response_model=QuizDetailResponse)
async def get_quiz(quiz_id: str):
    quiz = await configure_store().get_quiz(quiz_id)
    return {"status": "ok", "quiz": quiz, "drafts": initial_drafts(quiz)}

@app.post("/quizzes/{quiz_id}/attempt", response_model=AttemptSubmittedResponse)
async def submit_attempt(quiz_id: str, req: AttemptRequest):
    store = configure_store()
    quiz = await store.get_quiz(quiz_id)

    drafts = {
        q.id: coerce_draft(q, req.answers.get(q.id))
        for q in quiz.questions or []
        if q.id is not None
    }
    outcome = assemble(quiz, drafts)
    if not outcome.ok:
        raise outcome.error

    result = await store.submit_attempt(quiz_id, outcome.value)
    result_id = RESULT_SLOT.put(result)
    return {"status": "ok", "result_id": result_id}

@app.get("/quizzes/{quiz_id}/result/{result_id}", response_model=ResultResponse)
async def get_result(quiz_id: str, result_id: str):
    result = RESULT_SLOT.consume(result_id)
    if result is None:
        raise NotFound("No quiz results found. Please take the quiz first.")

    if result.quiz_id != quiz_id:
        logger.warning(f"Result {result_id} belongs to quiz={result.quiz_id}, requested under quiz={quiz_id}")

    try:
        quiz = await configure_store().get_quiz(result.quiz_id)
    except QuizError as e:
        # render without question texts rather than fail
        logger.warning(f"Quiz {result.quiz_id} unavailable for result {result_id}: {e.message}")
        quiz = None

    return {"status": "ok", "result": reconcile(result, quiz)}

# ------------------------------------------------------------
# Authoring routes
# ------------------------------------------------------------
@app.get("/admin/quizzes")
async def admin_list_quizzes():
    quizzes = await configure_store().list_quizzes(admin=True)
    return {"status": "ok", "quizzes": quizzes}

@app.post("/admin/quizzes")
async def admin_create_quiz(form: QuizForm):
    outcome = encode_quiz_form(form)
    if not outcome.ok:
        raise outcome.error
    quiz = await configure_store().create_quiz(outcome.value)
    logger.info(f"Created quiz={quiz.id} slug={quiz.slug}")
    return {"status": "ok", "quiz": quiz}

@app.get("/admin/quizzes/{quiz_id}")
async def admin_get_quiz(quiz_id: str):
    quiz = await configure_store().get_quiz(quiz_id, admin=True)
    return {"status": "ok", "quiz": quiz}

@app.put("/admin/quizzes/{quiz_id}")
async def admin_update_quiz(quiz_id: str, form: QuizForm):
    outcome = encode_quiz_form(form)
    if not outcome.ok:
        raise outcome.error
    quiz = await configure_store().update_quiz(quiz_id, outcome.value)
    return {"status": "ok", "quiz": quiz}

@app.delete("/admin/quizzes/{quiz_id}")
async def admin_delete_quiz(quiz_id: str):
    await configure_store().delete_quiz(quiz_id)
    logger.info(f"Deleted quiz={quiz_id}")
    return {"status": "ok"}

@app.get("/admin/question-forms/{question_type}")
def admin_blank_question_form(question_type: QuestionType):
    return {"status": "ok", "form": default_form(question_type)}

@app.post("/admin/quizzes/{quiz_id}/questions")
async def admin_create_question(quiz_id: str, form: QuestionForm):
    outcome = encode_question_form(form)
    if not outcome.ok:
        raise outcome.error
    question = await configure_store().create_question(quiz_id, outcome.value)
    return {"status": "ok", "question": question}

@app.get("/admin/questions/{question_id}/form")
async def admin_question_form(question_id: str):
    question = await configure_store().find_question(question_id)
    return {"status": "ok", "quiz_id": question.quiz_id, "form": decode_question(question)}

@app.put("/admin/questions/{question_id}")
async def admin_update_question(question_id: str, form: QuestionForm):
    outcome = encode_question_form(form)
    if not outcome.ok:
        raise outcome.error
    question = await configure_store().update_question(question_id, outcome.value)
    return {"status": "ok", "question": question}

@app.delete("/admin/questions/{question_id}")
async def admin_delete_question(question_id: str):
    await configure_store().delete_question(question_id)
    logger.info(f"Deleted question={question_id}")
    return {"status": "ok"}

@app.get("/healthz")
def healthz():
    return {"ok": True}
