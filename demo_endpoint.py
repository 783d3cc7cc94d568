"""
Quick demo script to run the invoice analytics API locally.

This script starts a local server and shows how to make requests to the endpoints.
"""

import uvicorn

if __name__ == "__main__":
    print("=" * 60)
    print("Starting Invoice Analytics Backend Demo")
    print("=" * 60)
    print()
    print("📌 API Endpoints:")
    print("   - Health Check:  GET  http://localhost:8000/health")
    print("   - Invoices:      GET  http://localhost:8000/api/invoices?page=1&limit=10")
    print("   - Invoice:       GET  http://localhost:8000/api/invoices/{invoice_num}")
    print("   - Analytics:     GET  http://localhost:8000/api/analytics/summary")
    print("   - Export:        GET  http://localhost:8000/api/export/invoices")
    print("   - Chat:          POST http://localhost:8000/api/chat")
    print("   - API Docs:           http://localhost:8000/docs")
    print()
    print("🔐 Authentication:")
    print("   Log in with Google at http://localhost:8000/api/auth/google")
    print("   /api/invoices/user requires the resulting session cookie")
    print()
    print("📝 Test with curl:")
    print('   curl "http://localhost:8000/api/invoices?vendor=BuildSmart&startDate=2023-01-01&endDate=2023-01-31"')
    print('   curl -X POST "http://localhost:8000/api/chat" \\')
    print('     -H "Content-Type: application/json" \\')
    print('     -d \'{"message": "Show me BuildSmart invoices from January"}\'')
    print()
    print("=" * 60)
    print("Starting server on http://localhost:8000")
    print("Press Ctrl+C to stop")
    print("=" * 60)
    print()

    uvicorn.run(
        "backend.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
