"""
App layer: UI 서버 (FastAPI + HTMX).

역할:
- 슬롯 업로드/제거, 생성 트리거, 결과 표시
- 세션 상태는 서버 메모리에만 존재 (영속화 없음)

주의: 폴더 구분
- src/app/templates/ → Jinja2 HTML (HTMX)
- src/app/static/ → CSS
"""
