from typing import Optional, Union

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from solver import solve_system
from solver.parsing import parse_system

app = FastAPI(title="LinSolver API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class SystemRequest(BaseModel):
    matrix: list[list[Union[float, str]]]
    vector: list[Union[float, str]]


class StepInfo(BaseModel):
    step_number: int
    description: str
    expression: str
    explanation: str


class TraceStep(BaseModel):
    operation: str
    description: str
    matrix: list[list[float]]
    vector: list[float]


class SolutionInfo(BaseModel):
    type: str
    solution: Optional[list[Union[float, str]]] = None
    pivot_vars: Optional[list[int]] = None
    free_vars: Optional[list[int]] = None
    is_homogeneous: bool
    coefficient_rank: int
    augmented_rank: int
    explanation: str
    steps: list[TraceStep]


class SolveResponse(BaseModel):
    given: dict
    method: dict
    steps: list[StepInfo]
    final_answer: str
    verification_steps: list[StepInfo]
    result: SolutionInfo
    summary: dict


@app.get("/api/health")
def health():
    return {"status": "ok"}


@app.post("/api/solve", response_model=SolveResponse)
def solve(req: SystemRequest):
    if not req.matrix:
        raise HTTPException(status_code=400, detail="The system needs at least one equation.")

    try:
        matrix, vector = parse_system(req.matrix, req.vector)
        result = solve_system(matrix, vector)
    except ValueError as e:  # parse errors and InvalidDimensions
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Solver error: {str(e)}")

    return result
