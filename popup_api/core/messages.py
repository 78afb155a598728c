"""Localized messages returned to clients and written to the server log."""

LIST_FAILED = "팝업 목록을 불러올 수 없습니다."
SAVE_FAILED = "팝업을 저장할 수 없습니다."
DELETE_FAILED = "팝업을 삭제할 수 없습니다."
ACTIVE_FAILED = "활성 팝업을 불러올 수 없습니다."
BAD_REQUEST = "잘못된 요청 형식입니다."
BODY_TOO_LARGE = "요청 본문이 너무 큽니다."

LOG_LIST_FAILED = "팝업 목록 읽기 오류"
LOG_SAVE_FAILED = "팝업 저장 오류"
LOG_DELETE_FAILED = "팝업 삭제 오류"
LOG_ACTIVE_FAILED = "활성 팝업 조회 오류"

SERVER_RUNNING = "서버가 http://localhost:%s에서 실행 중입니다."
SERVER_READY = "팝업 관리 시스템이 준비되었습니다."
SERVER_STOPPING = "서버를 종료합니다..."
