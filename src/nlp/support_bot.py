# src/nlp/support_bot.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

ESTIMATED_RESOLUTION = '24-48 hours'


def categorize_complaint(message: str) -> str:
    text = (message or '').lower()

    if 'data' in text and 'loading' in text:
        return 'technical_data'
    if 'login' in text or 'auth' in text:
        return 'authentication'
    if 'feature' in text or 'request' in text:
        return 'feature_request'
    if 'bug' in text or 'error' in text:
        return 'bug_report'
    if 'chart' in text or 'visual' in text:
        return 'visualization'
    if 'slow' in text or 'performance' in text:
        return 'performance'
    return 'general_inquiry'


def assess_priority(message: str) -> str:
    text = (message or '').lower()

    if 'urgent' in text or 'critical' in text or "can't work" in text:
        return 'urgent'
    if 'bug' in text or 'error' in text or 'broken' in text:
        return 'high'
    if 'slow' in text or 'feature' in text:
        return 'medium'
    return 'low'


def new_ticket_id(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"OCEAN-{int(now.timestamp() * 1000)}"


def generate_complaint_response(message: str, ticket_id: str) -> str:
    """Canned troubleshooting reply matched on keywords in the complaint"""
    text = (message or '').lower()

    if 'data' in text and ('loading' in text or 'slow' in text):
        return f"""Thank you for reporting the data loading issue.

**Immediate troubleshooting steps:**
• Refresh the page
• Check your internet connection
• Reset the sidebar filters to their defaults

**Platform Status:** Float data is generated locally, so the dashboard keeps working without a server.

**Next Steps:** I've created ticket {ticket_id} to track this issue."""

    if any(word in text for word in ('login', 'auth', 'password', 'sign')):
        return f"""I'm sorry you're experiencing authentication difficulties.

**Common solutions:**
• **Password Reset:** Use the "Forgot Password" link on the login page
• **Browser Issues:** Clear cookies and try a private window
• **Account Verification:** Check your email for verification links

**Escalation:** I've created ticket {ticket_id} for account-specific issues. Our support team will contact you within 24 hours if the issue persists."""

    if any(word in text for word in ('feature', 'request', 'need', 'want')):
        return f"""Thank you for your feature suggestion!

**Your Request:** I've logged your feature request in our product backlog (ticket {ticket_id}).

**Current Roadmap Highlights:**
• Enhanced data export capabilities
• Advanced visualization tools
• Collaborative research features

Is there any specific aspect of this feature that's particularly important for your research?"""

    if any(word in text for word in ('chart', 'graph', 'visual', 'display')):
        return f"""I understand you're having visualization issues.

**Quick Fixes:**
• **Data Filters:** Check if applied filters might be limiting displayed data
• **Map Mode:** Switch the map to cluster mode for large float sets
• **Table View:** Use the data table for detailed inspection

**Technical Support:** Ticket {ticket_id} created. Please include your browser version and screen resolution."""

    if any(word in text for word in ('bug', 'error', 'broken', 'not working')):
        return f"""Thank you for the bug report!

**Bug Documentation:**
• **Ticket ID:** {ticket_id}
• **Priority:** High (bugs affecting core functionality)
• **Status:** Under investigation

**Information Needed:**
• Steps to reproduce the issue
• Error messages (if any)
• Screenshots

Can you provide more details about when this bug occurs?"""

    return f"""Thank you for reaching out! I'm here to help with the FloatChat Ocean Analytics dashboard.

**Support Process:**
• **Ticket Created:** {ticket_id} for detailed follow-up
• **Response Time:** Technical issues resolved within {ESTIMATED_RESOLUTION}

Could you provide more specific details about what you'd like me to help you with?"""


def handle_complaint(message: str, user_id: str = 'anonymous', user_email: str = '',
                     platform: str = 'streamlit', now: Optional[datetime] = None) -> Dict[str, Any]:
    """Create a support ticket for a complaint and return the reply"""
    now = now or datetime.now(timezone.utc)
    ticket_id = new_ticket_id(now)
    category = categorize_complaint(message)
    priority = assess_priority(message)

    logger.info(
        f"Complaint logged: ticket={ticket_id} user={user_id} "
        f"platform={platform} category={category} priority={priority}"
    )
    logger.debug(f"Contact email for {ticket_id}: {user_email}")

    return {
        'response': generate_complaint_response(message, ticket_id),
        'ticket_id': ticket_id,
        'status': 'received',
        'estimated_resolution': ESTIMATED_RESOLUTION,
        'category': category,
        'priority': priority,
        'timestamp': now.isoformat()
    }
