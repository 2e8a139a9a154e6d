from .events import (
    EventListCreateView,
    EventDetailView,
    EventPublishView,
    EventInviteView,
    SignInviteView,
    VrCategoryListCreateView,
    VrCategoryDetailView,
    SpecialRewardListCreateView,
    SpecialRewardDetailView,
    CriteriaListCreateView,
    CriteriaDetailView,
)
from .participants import (
    JoinEventView,
    LeaveEventView,
    ParticipantListView,
    ParticipantDetailView,
)
from .teams import (
    TeamListCreateView,
    TeamDetailView,
    TeamMemberAddView,
    TeamMemberRemoveView,
    TeamCandidatesView,
)
from .rewards import (
    TeamVrView,
    VrBudgetView,
    TeamSpecialVoteView,
)
from .feedback import (
    TeamCommentView,
    EventRatingView,
    EventRatingListView,
    TeamGradeView,
    GradingStatusView,
    EvaluationResultsView,
)
